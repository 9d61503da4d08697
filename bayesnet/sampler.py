# sampler.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Mapping, Optional, Union

import numpy as np

from .node import Assignment, InvalidArgumentError, Node
from .stats import NetworkStat, StatMap

if TYPE_CHECKING:
    from .network import BayesianNetwork


logger = logging.getLogger(__name__)


def markov_blanket_sample(node: Node, rng: np.random.Generator) -> bool:
    """
    Draw a new value for `node` from P(node | Markov blanket).

    For each candidate value the node is assigned first and its children are
    evaluated afterwards, so every child sees the hypothesized parent value:

        w(v) = P(node=v | parents) * prod_c P(c = assignment(c) | parents(c))

    Returns True unless u > w(True) / (w(True) + w(False)). When both
    weights are zero the ratio is undefined and True is returned, which lets
    a chain started in an impossible state move on. The node is left
    assigned to False; the caller stores the returned value.
    """
    weights = []
    for cond in (True, False):
        node.set_assignment(cond)
        w = node.prob_given(cond)
        for child in node.children:
            w *= child.prob()
        weights.append(w)

    numerator = weights[0]
    Z = weights[0] + weights[1]
    if Z <= 0.0:
        logger.debug("Markov blanket of '%s' has zero probability; choosing True", node.name)
        return True

    markov_prob = numerator / Z
    return not (rng.random() > markov_prob)


@dataclass
class AncestralSampler:
    """
    Forward sampler over the network's index order.

    Observed variables are clamped and never resampled. Clamping a non-root
    variable does not condition its ancestors: the result is forward
    simulation with fixed evidence, not the posterior given that evidence.
    """
    bn: "BayesianNetwork"
    seed: Union[int, np.random.Generator, None] = None

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)

    def run(self, observations: Optional[Mapping[str, Assignment]] = None, n: int = 1000) -> StatMap:
        if n <= 0:
            raise InvalidArgumentError("n must be positive.")
        observed = self.bn.check_names(observations or {})

        clamped_children = [
            name for name in observed if not self.bn.get_node(name).is_root
        ]
        if clamped_children:
            logger.warning(
                "Ancestral sampling clamps non-root variables %s; ancestors are not conditioned on them.",
                clamped_children,
            )

        self.bn.reset()
        try:
            self.bn.update_graph_values(observed)
            free: List[Node] = [node for node in self.bn.get_nodes() if node.name not in observed]
            stat = NetworkStat(self.bn.get_nodes())

            for _ in range(n):
                for node in free:
                    node.set_assignment(node.sample(self.rng))
                stat.update()
                for node in free:
                    node.reset()

            logger.debug("Ancestral sampling: %d sweeps over %d free nodes", n, len(free))
            return stat.get_stats()
        finally:
            self.bn.reset()


@dataclass
class GibbsSampler:
    """
    Single-site Gibbs sampler using each free variable's Markov blanket.

    - observations are fixed for the whole run.
    - free variables start at False and are visited in index order.
    - n_burn_in sweeps are discarded, then n_sample sweeps are recorded.
    - only free variables appear in the result.
    """
    bn: "BayesianNetwork"
    seed: Union[int, np.random.Generator, None] = None

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)

    def sweep(self, free: List[Node]) -> None:
        for xi in free:
            sample = markov_blanket_sample(xi, self.rng)
            xi.set_assignment(sample)

    def run(
        self,
        observations: Optional[Mapping[str, Assignment]] = None,
        n_burn_in: int = 1000,
        n_sample: int = 10000,
    ) -> StatMap:
        if n_burn_in < 0:
            raise InvalidArgumentError("n_burn_in must be non-negative.")
        if n_sample <= 0:
            raise InvalidArgumentError("n_sample must be positive.")
        observed = self.bn.check_names(observations or {})

        self.bn.reset()
        try:
            if not observed:
                free = self.bn.get_nodes()
                self.bn.reset_with_assignment(False)
            else:
                self.bn.update_graph_values(observed)
                free = []
                for node in self.bn.get_nodes():
                    if not node.is_assigned:
                        node.set_assignment(False)
                        free.append(node)

            stat = NetworkStat(free)

            for _ in range(n_burn_in):
                self.sweep(free)

            for _ in range(n_sample):
                self.sweep(free)
                stat.update()

            logger.debug(
                "Gibbs sampling: %d burn-in + %d recorded sweeps over %d free nodes",
                n_burn_in, n_sample, len(free),
            )
            if not free:
                return {}
            return stat.get_stats()
        finally:
            self.bn.reset()
