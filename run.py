from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bayesnet import BNError, NETWORKS, StatMap
from utils import format_stats, setup_logger, write_stats_csv


@dataclass
class SamplingSpec:
    # ancestral, gibbs, both or joint
    method: str = "both"
    # NAME -> "T"/"F"
    observations: Dict[str, str] = field(default_factory=dict)
    # ancestral draws / recorded Gibbs sweeps
    n_samples: int = 10000
    # discarded Gibbs sweeps
    n_burn_in: int = 1000
    seed: Optional[int] = 0
    output_csv: Optional[str] = None


def parse_observation(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    value = value.strip().upper()
    if not sep or not name or value not in ("T", "F"):
        raise argparse.ArgumentTypeError(f"Observation must look like NAME=T or NAME=F, got '{text}'.")
    return name.strip(), value


def get_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sample a binary Bayesian network",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Network / inference
    parser.add_argument(
        "--network",
        type=str,
        default="student",
        choices=sorted(NETWORKS),
        help="Example network to sample.",
    )
    parser.add_argument(
        "--method",
        type=str,
        default="both",
        choices=["ancestral", "gibbs", "both", "joint"],
        help="Inference method.",
    )
    parser.add_argument(
        "--observe",
        type=parse_observation,
        action="append",
        default=[],
        metavar="NAME=T|F",
        help="Clamp a variable (repeatable).",
    )

    # Sampling
    parser.add_argument(
        "--samples",
        type=int,
        default=10_000,
        help="Ancestral draws / recorded Gibbs sweeps.",
    )
    parser.add_argument(
        "--burn-in",
        type=int,
        default=1000,
        help="Gibbs sweeps discarded before recording.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed.",
    )

    # Output / misc
    parser.add_argument(
        "--output-dir",
        type=str,
        default="outputs",
        help="Directory for logs.",
    )
    parser.add_argument(
        "--output-csv",
        type=str,
        default=None,
        help="Optional CSV file for the resulting statistics.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level.",
    )

    args = parser.parse_args(argv)
    return args


def run(bn, spec: SamplingSpec, logger) -> Dict[str, StatMap]:
    results: Dict[str, StatMap] = {}
    order = [n.name for n in bn.get_nodes()]

    if spec.method == "joint":
        p = bn.joint_probability(spec.observations or None)
        logger.info(f"Joint probability: {p:.6f}")
        return results

    if spec.method in ("ancestral", "both"):
        results["ancestral"] = bn.ancestral_sampling(spec.observations, spec.n_samples, seed=spec.seed)

    if spec.method in ("gibbs", "both"):
        results["gibbs"] = bn.gibbs_sampling(
            spec.observations, spec.n_burn_in, spec.n_samples, seed=spec.seed
        )

    for method, stats in results.items():
        logger.info(f"{method}:\n{format_stats(stats, order)}")
        if spec.output_csv is not None:
            write_stats_csv(spec.output_csv, stats, method, append=method != next(iter(results)))

    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = get_args(argv)

    run_dir = os.path.join(args.output_dir, args.network, f"seed_{args.seed}")
    logger = setup_logger(run_dir, log_level=args.log_level)

    spec = SamplingSpec(
        method=args.method,
        observations=dict(args.observe),
        n_samples=args.samples,
        n_burn_in=args.burn_in,
        seed=args.seed,
        output_csv=args.output_csv,
    )

    try:
        bn = NETWORKS[args.network]()
        logger.info(f"Network '{args.network}':\n{bn.print_network()}")
        run(bn, spec, logger)
    except BNError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
