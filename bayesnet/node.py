# node.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Union
import numpy as np


Assignment = Union[bool, np.bool_, str]


class BNError(RuntimeError):
    pass


class DuplicateNodeError(BNError):
    pass


class MissingNodeError(BNError):
    pass


class CPTDimensionError(BNError):
    pass


class CycleError(BNError):
    pass


class UnsetAssignmentError(BNError):
    pass


class CPTKeyError(BNError):
    pass


class InvalidArgumentError(BNError, ValueError):
    pass


def to_truth(value: Assignment) -> bool:
    """
    Normalize an assignment given as a bool or as a CPT letter ("T"/"F").
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str) and value in ("T", "F"):
        return value == "T"
    raise InvalidArgumentError(f"Invalid assignment: '{value}' should be T or F")


def truth_letter(value: bool) -> str:
    return "T" if value else "F"


class Node:
    """
    Binary random variable backed by a conditional probability table.

    - parent_names fixes the CPT key order: key[j] is the truth letter of parent j.
    - cpt[key] = P(node=True | parents spell out key).
    - Roots use the keys "T" and "F" for P(True) and P(False).

    Parent/child references are wired by BayesianNetwork; a Node on its own
    only knows the names of its parents.
    """

    def __init__(
        self,
        name: str,
        parent_names: Sequence[str] = (),
        cpt: Optional[Mapping[str, float]] = None,
    ) -> None:
        parent_names = tuple(parent_names)
        if len(set(parent_names)) != len(parent_names):
            raise BNError(f"Node '{name}' declares a parent more than once: {list(parent_names)}")
        if name in parent_names:
            raise BNError(f"Self parent is not allowed ('{name}').")

        self.name = name
        self.parent_names = parent_names
        self.cpt: Dict[str, float] = {k: float(v) for k, v in (cpt or {}).items()}

        self.index: int = 0
        self.parents: List[Node] = []
        self.children: List[Node] = []
        self.assignment: Optional[bool] = None

    @classmethod
    def root(cls, name: str, p_true: float) -> "Node":
        p_true = float(p_true)
        return cls(name, (), {"T": p_true, "F": 1.0 - p_true})

    @property
    def is_root(self) -> bool:
        return len(self.parent_names) == 0

    @property
    def is_assigned(self) -> bool:
        return self.assignment is not None

    @property
    def num_parents(self) -> int:
        return len(self.parent_names)

    @property
    def num_children(self) -> int:
        return len(self.children)

    def add_parent(self, parent: "Node") -> None:
        if any(p is parent for p in self.parents):
            return
        self.parents.append(parent)

    def add_child(self, child: "Node") -> None:
        if any(c is child for c in self.children):
            return
        self.children.append(child)

    def set_assignment(self, value: Assignment) -> None:
        self.assignment = to_truth(value)

    def reset(self) -> None:
        self.assignment = None

    def parent_key(self) -> str:
        """
        CPT key for the parents' current assignments, in declaration order.
        """
        letters = []
        for parent in self.parents:
            if parent.assignment is None:
                raise UnsetAssignmentError(
                    f"Cannot evaluate '{self.name}': parent '{parent.name}' has no assignment."
                )
            letters.append(truth_letter(parent.assignment))
        return "".join(letters)

    def prob_true(self) -> float:
        if self.is_root:
            key = "T"
        else:
            key = self.parent_key()
        try:
            return self.cpt[key]
        except KeyError:
            raise CPTKeyError(f"'{key}' is not a valid CPT key for '{self.name}'.") from None

    def prob_given(self, value: Assignment) -> float:
        """
        P(node=value | current parent assignments).
        """
        p = self.prob_true()
        return p if to_truth(value) else 1.0 - p

    def prob(self) -> float:
        """
        Probability of the node's current assignment given its parents.
        """
        if self.assignment is None:
            raise UnsetAssignmentError(f"'{self.name}' has no assignment.")
        return self.prob_given(self.assignment)

    def sample(self, rng: np.random.Generator) -> bool:
        return bool(rng.random() < self.prob_true())

    def validate_cpt(self) -> None:
        k = self.num_parents
        if self.is_root:
            if len(self.cpt) != 2 or set(self.cpt) != {"T", "F"}:
                raise CPTDimensionError(
                    f"(Root): {self.name}'s CPT has wrong dimension: exp 2 entries keyed T/F, "
                    f"got {len(self.cpt)} (cpt: {self.cpt})"
                )
        else:
            expected = 1 << k
            if len(self.cpt) != expected:
                raise CPTDimensionError(
                    f"{self.name}'s CPT has wrong dimensions: exp {expected} != {len(self.cpt)} act "
                    f"(cpt: {self.cpt})"
                )
            for key in self.cpt:
                if len(key) != k or any(c not in "TF" for c in key):
                    raise CPTDimensionError(
                        f"{self.name}'s CPT key '{key}' must be {k} characters of T/F."
                    )

        values = np.fromiter(self.cpt.values(), dtype=np.float64, count=len(self.cpt))
        if np.any(values < 0.0) or np.any(values > 1.0):
            raise CPTDimensionError(f"CPT for '{self.name}' has probabilities outside [0,1].")

    def __repr__(self) -> str:
        return f"Node({self.name!r}, index={self.index}, assignment={self.assignment_string()})"

    def assignment_string(self) -> str:
        if self.assignment is None:
            return "-"
        return truth_letter(self.assignment)

    def __str__(self) -> str:
        parents = " ".join(p.name for p in self.parents)
        children = " ".join(c.name for c in self.children)
        return (
            f"{self.name}({self.index}): s='{self.assignment_string()}' {self.cpt}\n"
            f"\tparents:  [{parents}]\n"
            f"\tchildren: [{children}]"
        )
