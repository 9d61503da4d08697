# network.py
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Mapping, Optional, Union

import numpy as np

from .node import (
    Assignment,
    BNError,
    CycleError,
    DuplicateNodeError,
    MissingNodeError,
    Node,
    to_truth,
)
from .sampler import AncestralSampler, GibbsSampler
from .stats import StatMap


logger = logging.getLogger(__name__)

SeedLike = Union[int, np.random.Generator, None]


class BayesianNetwork:
    """
    Directed acyclic network of binary Nodes.

    Construction wires parents and children from the declared parent names,
    validates every CPT and indexes the nodes so that each parent precedes
    all of its children. The structure is fixed afterwards; only node
    assignments change while sampling.
    """

    def __init__(self, *nodes: Node) -> None:
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, List[str]] = {}
        self._index: List[Node] = []
        self._lock = threading.RLock()

        for node in nodes:
            self._add_node(node)

        # nodes are only wired once every parent name resolves and every CPT is valid
        for node in nodes:
            self._resolve_parents(node)
        self._validate_cpts()

        try:
            for node in nodes:
                self._add_connections(node)
            self._index_network()
        except BNError:
            self._unwire()
            raise

        logger.debug(
            "Built network with %d nodes and %d edges",
            len(self._nodes),
            sum(len(c) for c in self._edges.values()),
        )

    def _add_node(self, node: Node) -> None:
        if node.name in self._nodes:
            raise DuplicateNodeError(f"Duplicate node name: {node.name}")
        if node.index != 0 or node.parents or node.children:
            raise BNError(
                f"Node '{node.name}' already belongs to a network; build a new Node or use copy()."
            )
        self._nodes[node.name] = node
        self._edges[node.name] = []

    def _resolve_parents(self, child: Node) -> None:
        for parent_name in child.parent_names:
            if parent_name not in self._nodes:
                raise MissingNodeError(
                    f"Parent '{parent_name}' of '{child.name}' does not exist."
                )

    def _add_connections(self, child: Node) -> None:
        for parent_name in child.parent_names:
            parent = self._nodes[parent_name]
            parent.add_child(child)
            child.add_parent(parent)
            if child.name not in self._edges[parent_name]:
                self._edges[parent_name].append(child.name)

    def _validate_cpts(self) -> None:
        for name in sorted(self._nodes):
            self._nodes[name].validate_cpt()

    def _index_network(self) -> None:
        """
        Breadth-first indexing from the roots.

        A child joins the next frontier only once every one of its parents
        has been indexed, so index(parent) < index(child) on every edge.
        """
        frontier = [n for n in self._nodes.values() if n.is_root]
        next_id = 1
        while frontier:
            children: List[Node] = []
            for node in frontier:
                if node.index != 0:
                    continue
                node.index = next_id
                self._index.append(node)
                next_id += 1
                children.extend(node.children)
            frontier = [
                c for c in children
                if c.index == 0 and all(p.index != 0 for p in c.parents)
            ]

        if len(self._index) != len(self._nodes):
            unindexed = [n for n in self._nodes if self._nodes[n].index == 0]
            raise CycleError(
                f"Cycle detected in DAG: indexed {len(self._index)} of {len(self._nodes)} nodes, "
                f"unreachable from the roots: {unindexed}"
            )

    def _unwire(self) -> None:
        for node in self._nodes.values():
            node.parents = []
            node.children = []
            node.index = 0
        self._index = []
        self._edges = {name: [] for name in self._nodes}

    @property
    def edges(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self._edges.items()}

    def get_node(self, name: str) -> Node:
        try:
            return self._nodes[name]
        except KeyError:
            raise MissingNodeError(f"Node '{name}' does not exist in network.") from None

    def node_count(self) -> int:
        return len(self._index)

    def get_nodes(self) -> List[Node]:
        """
        Nodes in index order (roots first).
        """
        return list(self._index)

    def markov_blanket(self, name: str) -> List[Node]:
        """
        Parents, children and the children's other parents of `name`, in index order.
        """
        node = self.get_node(name)
        blanket = {id(p): p for p in node.parents}
        for child in node.children:
            blanket[id(child)] = child
            for co_parent in child.parents:
                if co_parent is not node:
                    blanket[id(co_parent)] = co_parent
        return sorted(blanket.values(), key=lambda n: n.index)

    def reset(self) -> None:
        for node in self._index:
            node.reset()

    def reset_with_assignment(self, value: Assignment) -> None:
        truth = to_truth(value)
        for node in self._index:
            node.set_assignment(truth)

    def check_names(self, mapping: Mapping[str, Assignment]) -> Dict[str, bool]:
        """
        Resolve an observation mapping without touching any node.
        """
        resolved: Dict[str, bool] = {}
        for name, value in mapping.items():
            if name not in self._nodes:
                raise MissingNodeError(
                    f"Node '{name}' does not exist in network (mapping: {dict(mapping)})"
                )
            resolved[name] = to_truth(value)
        return resolved

    def update_graph_values(self, mapping: Mapping[str, Assignment]) -> None:
        """
        Set the assignment of every node named in `mapping`, e.g. {"X1": "F", "X3": "T"}.
        Fails before touching any node if a name is unknown.
        """
        for name, truth in self.check_names(mapping).items():
            self._nodes[name].set_assignment(truth)

    def joint_probability(self, assignment: Optional[Mapping[str, Assignment]] = None) -> float:
        """
        Product over the index of P(node = its assignment | parents).

        Without `assignment` every node is clamped to True. With a partial
        assignment the lookup of an unset node fails.
        """
        with self._lock:
            if assignment is None:
                self.reset_with_assignment(True)
            else:
                resolved = self.check_names(assignment)
                self.reset()
                self.update_graph_values(resolved)
            try:
                p = 1.0
                for node in self._index:
                    p *= node.prob()
                return p
            finally:
                self.reset()

    def ancestral_sampling(
        self,
        observations: Optional[Mapping[str, Assignment]] = None,
        n: int = 1000,
        seed: SeedLike = None,
    ) -> StatMap:
        with self._lock:
            return AncestralSampler(self, seed=seed).run(observations, n)

    def gibbs_sampling(
        self,
        observations: Optional[Mapping[str, Assignment]] = None,
        n_burn_in: int = 1000,
        n_sample: int = 10000,
        seed: SeedLike = None,
    ) -> StatMap:
        with self._lock:
            return GibbsSampler(self, seed=seed).run(observations, n_burn_in, n_sample)

    def copy(self) -> "BayesianNetwork":
        """
        Independent network with fresh, unassigned nodes.
        """
        nodes = [
            Node(n.name, n.parent_names, dict(n.cpt))
            for n in self._nodes.values()
        ]
        return BayesianNetwork(*nodes)

    def __repr__(self) -> str:
        return f"BayesianNetwork(nodes={[n.name for n in self._index]})"

    def __str__(self) -> str:
        return " ".join(n.assignment_string() for n in self._index)

    def print_network(self) -> str:
        if not self._index:
            return "[]"
        return "\n".join(str(n) for n in self._index)
