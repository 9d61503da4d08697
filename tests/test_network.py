"""
Tests for network.py - construction, indexing and graph-wide operations.
"""

import pytest

from bayesnet import (
    BayesianNetwork,
    BNError,
    CPTDimensionError,
    CycleError,
    DuplicateNodeError,
    InvalidArgumentError,
    MissingNodeError,
    Node,
    UnsetAssignmentError,
    get_bishop,
    get_ch3,
    get_student,
    get_two_node,
)


def assert_topological(bn):
    for node in bn.get_nodes():
        for child in node.children:
            assert node.index < child.index, f"{node.name} -> {child.name}"


class TestConstruction:
    def test_duplicate_name_rejected(self):
        with pytest.raises(DuplicateNodeError):
            BayesianNetwork(Node.root("A", 0.5), Node.root("A", 0.2))

    def test_missing_parent_rejected(self):
        a = Node.root("A", 0.5)
        b = Node("B", ["Z"], {"T": 0.1, "F": 0.2})
        with pytest.raises(MissingNodeError, match="Parent 'Z'"):
            BayesianNetwork(a, b)

    def test_cpt_dimension_mismatch_rejected(self):
        a = Node.root("A", 0.5)
        b = Node("B", ["A"], {"T": 0.1})
        with pytest.raises(CPTDimensionError):
            BayesianNetwork(a, b)

    def test_root_with_too_many_entries_rejected(self):
        a = Node("A", [], {"T": 0.5, "F": 0.5, "TT": 0.1})
        with pytest.raises(CPTDimensionError):
            BayesianNetwork(a)

    def test_first_mismatch_in_name_order_reported(self):
        a = Node.root("A", 0.5)
        c = Node("C", ["A"], {"T": 0.1})
        b = Node("B", ["A"], {"F": 0.1})
        with pytest.raises(CPTDimensionError, match="^B's CPT"):
            BayesianNetwork(a, c, b)

    def test_cycle_rejected(self):
        a = Node.root("A", 0.5)
        b = Node("B", ["A", "C"], {"TT": 0.1, "TF": 0.2, "FT": 0.3, "FF": 0.4})
        c = Node("C", ["B"], {"T": 0.1, "F": 0.2})
        with pytest.raises(CycleError):
            BayesianNetwork(a, b, c)

    def test_cycle_message_names_unreachable_nodes(self):
        a = Node.root("A", 0.5)
        b = Node("B", ["C"], {"T": 0.1, "F": 0.2})
        c = Node("C", ["B"], {"T": 0.1, "F": 0.2})
        with pytest.raises(CycleError, match=r"indexed 1 of 3 nodes.*\['B', 'C'\]"):
            BayesianNetwork(a, b, c)

    def test_missing_parent_leaves_nodes_unwired(self):
        """A failed build does not touch the nodes it was given."""
        a = Node.root("A", 0.5)
        b = Node("B", ["A"], {"T": 0.1, "F": 0.2})
        c = Node("C", ["Z"], {"T": 0.1, "F": 0.2})
        with pytest.raises(MissingNodeError):
            BayesianNetwork(a, b, c)
        assert a.children == [] and b.parents == []
        assert a.index == 0 and b.index == 0

        bn = BayesianNetwork(a, b)
        assert [n.name for n in bn.get_nodes()] == ["A", "B"]
        assert a.children == [b]

    def test_cycle_failure_unwires_nodes(self):
        a = Node.root("A", 0.5)
        b = Node("B", ["A", "C"], {"TT": 0.1, "TF": 0.2, "FT": 0.3, "FF": 0.4})
        c = Node("C", ["B"], {"T": 0.1, "F": 0.2})
        with pytest.raises(CycleError):
            BayesianNetwork(a, b, c)
        assert all(n.index == 0 and not n.parents and not n.children for n in (a, b, c))

        bn = BayesianNetwork(a)
        assert bn.node_count() == 1

    def test_cpt_failure_leaves_nodes_unwired(self):
        a = Node.root("A", 0.5)
        b = Node("B", ["A"], {"T": 0.1})
        with pytest.raises(CPTDimensionError):
            BayesianNetwork(a, b)
        assert a.children == [] and b.parents == []

    def test_node_of_another_network_rejected(self):
        bn = get_two_node()
        with pytest.raises(BNError, match="already belongs to a network"):
            BayesianNetwork(bn.get_node("X1"))
        assert bn.get_node("X1").index == 1

    def test_edges_are_wired_both_ways(self):
        bn = get_ch3()
        r = bn.get_node("R")
        t = bn.get_node("T")
        assert t in r.children
        assert r in t.parents
        assert bn.edges == {"R": ["J", "T"], "S": ["T"], "J": [], "T": []}

    def test_node_count_and_lookup(self):
        bn = get_student()
        assert bn.node_count() == 7
        assert bn.get_node("P").name == "P"
        with pytest.raises(MissingNodeError):
            bn.get_node("nope")


class TestIndexing:
    @pytest.mark.parametrize("factory", [get_two_node, get_ch3, get_student, get_bishop])
    def test_parents_precede_children(self, factory):
        bn = factory()
        assert_topological(bn)
        assert [n.index for n in bn.get_nodes()] == list(range(1, bn.node_count() + 1))

    def test_roots_indexed_first_in_insertion_order(self):
        bn = get_student()
        assert [n.name for n in bn.get_nodes()][:3] == ["E", "I", "D"]

    def test_node_reached_early_waits_for_all_parents(self):
        # C is a child of root A and of D, which is two levels down
        a = Node.root("A", 0.5)
        b = Node.root("B", 0.5)
        d = Node("D", ["B"], {"T": 0.5, "F": 0.5})
        c = Node("C", ["A", "D"], {"TT": 0.1, "TF": 0.2, "FT": 0.3, "FF": 0.4})
        bn = BayesianNetwork(a, b, c, d)
        assert_topological(bn)
        assert [n.name for n in bn.get_nodes()] == ["A", "B", "D", "C"]

    def test_markov_blanket(self):
        bn = get_student()
        # index order is E I D P R J U; R is U's other parent
        assert [n.name for n in bn.markov_blanket("P")] == ["E", "I", "D", "R", "J", "U"]
        assert [n.name for n in bn.markov_blanket("J")] == ["P"]


class TestAssignments:
    def test_reset_with_assignment(self):
        bn = get_student()
        bn.reset_with_assignment("T")
        assert all(n.assignment is True for n in bn.get_nodes())
        bn.reset()
        assert all(n.assignment is None for n in bn.get_nodes())

    def test_reset_with_invalid_assignment(self):
        bn = get_student()
        with pytest.raises(InvalidArgumentError):
            bn.reset_with_assignment("maybe")

    def test_update_graph_values(self):
        bn = get_student()
        bn.update_graph_values({"E": "T", "I": "F"})
        assert bn.get_node("E").assignment is True
        assert bn.get_node("I").assignment is False
        assert bn.get_node("D").assignment is None

    def test_unknown_name_leaves_graph_untouched(self):
        bn = get_student()
        with pytest.raises(MissingNodeError):
            bn.update_graph_values({"E": "T", "Q": "F"})
        assert all(n.assignment is None for n in bn.get_nodes())


class TestJointProbability:
    def test_ch3_all_true(self):
        """Deterministic CPT entries give an exactly reproducible product."""
        bn = get_ch3()
        first = bn.joint_probability()
        assert first == 0.8 * 0.4 * 1.0 * 1.0
        assert bn.joint_probability() == first

    def test_two_node_all_true(self):
        x1 = Node.root("X1", 0.5)
        x2 = Node("X2", ["X1"], {"T": 2.0 / 3.0, "F": 3.0 / 4.0})
        bn = BayesianNetwork(x1, x2)
        assert bn.joint_probability() == pytest.approx(1.0 / 3.0)

    def test_full_assignment(self):
        bn = get_ch3()
        p = bn.joint_probability({"R": "F", "S": "T", "J": "F", "T": "T"})
        assert p == pytest.approx(0.2 * 0.4 * 0.8 * 0.9)

    def test_impossible_assignment_has_zero_probability(self):
        bn = get_ch3()
        assert bn.joint_probability({"R": "F", "S": "F", "J": "T", "T": "T"}) == 0.0

    def test_partial_assignment_fails(self):
        bn = get_ch3()
        with pytest.raises(UnsetAssignmentError):
            bn.joint_probability({"R": "T"})

    def test_network_reset_afterwards(self):
        bn = get_ch3()
        bn.joint_probability()
        assert all(n.assignment is None for n in bn.get_nodes())


def test_copy_is_independent():
    bn = get_student()
    clone = bn.copy()
    assert [n.name for n in clone.get_nodes()] == [n.name for n in bn.get_nodes()]
    clone.reset_with_assignment("T")
    assert all(n.assignment is None for n in bn.get_nodes())
    assert clone.get_node("P") is not bn.get_node("P")


def test_str_shows_assignments():
    bn = get_two_node()
    assert str(bn) == "- -"
    bn.update_graph_values({"X1": "T"})
    assert str(bn) == "T -"
