import csv
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple


def setup_logger(output_dir: str,
                 log_level: str = "INFO",
                 log_file: Optional[str] = None) -> logging.Logger:
    """
    Creates a process-wide logger that logs to stdout and (optionally) a file.

    The "bayesnet" library logger is routed to the same handlers.
    """
    os.makedirs(output_dir, exist_ok=True)
    level = getattr(logging, log_level.upper())

    logger = logging.getLogger("run")
    logger.setLevel(level)
    logger.propagate = False  # avoid duplicate logs if root logger configured elsewhere

    lib_logger = logging.getLogger("bayesnet")
    lib_logger.setLevel(level)
    lib_logger.propagate = False

    # Clear any existing handlers (important in notebooks / re-runs)
    for lg in (logger, lib_logger):
        for h in list(lg.handlers):
            lg.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(fmt)

    # File handler
    if log_file is None:
        # default log filename in output_dir
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(output_dir, f"run_{ts}.log")
    fh = logging.FileHandler(log_file)
    fh.setLevel(level)
    fh.setFormatter(fmt)

    for lg in (logger, lib_logger):
        lg.addHandler(ch)
        lg.addHandler(fh)

    logger.info(f"Logging to file: {log_file}")
    return logger


def format_stats(stats: Mapping[str, Tuple[float, float]], order: Optional[Sequence[str]] = None) -> str:
    names = list(order) if order is not None else sorted(stats)
    return "\n".join(
        f"{name}: T: {stats[name][0]:.3f} F: {stats[name][1]:.3f}"
        for name in names
        if name in stats
    )


def write_stats_csv(path: str, stats: Mapping[str, Tuple[float, float]], method: str, append: bool = False) -> None:
    """
    One row per variable: method, node, p_true, p_false.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["method", "node", "p_true", "p_false"]
    write_header = not (append and out_path.exists() and out_path.stat().st_size > 0)

    with out_path.open("a" if append else "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        if write_header:
            writer.writeheader()
        for name, (p_true, p_false) in stats.items():
            writer.writerow(
                {
                    "method": method,
                    "node": name,
                    "p_true": float(p_true),
                    "p_false": float(p_false),
                }
            )
