# stats.py
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import numpy as np

from .node import BNError, Node


StatMap = Dict[str, Tuple[float, float]]


class NetworkStat:
    """
    Counts, per tracked node, the sweeps in which the node was True.

    Nodes are tracked in the order given (the network's index order).
    """

    def __init__(self, nodes: Sequence[Node]) -> None:
        self.nodes: List[Node] = list(nodes)
        self.count = np.zeros(len(self.nodes), dtype=np.int64)
        self.total = 0

    def update(self) -> None:
        # unset counts as False
        for i, node in enumerate(self.nodes):
            if node.assignment is True:
                self.count[i] += 1
        self.total += 1

    def get_stats(self) -> StatMap:
        """
        {name: (fraction True, fraction False)} over all recorded sweeps.
        """
        if self.total == 0:
            raise BNError("No sweeps recorded; call update() before get_stats().")
        total = float(self.total)
        stats: StatMap = {}
        for node, c in zip(self.nodes, self.count):
            stats[node.name] = (int(c) / total, (self.total - int(c)) / total)
        return stats
