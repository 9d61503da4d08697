from .node import (
    Node,
    BNError,
    DuplicateNodeError,
    MissingNodeError,
    CPTDimensionError,
    CycleError,
    UnsetAssignmentError,
    CPTKeyError,
    InvalidArgumentError,
)
from .network import BayesianNetwork
from .sampler import AncestralSampler, GibbsSampler, markov_blanket_sample
from .stats import NetworkStat, StatMap
from .graphs import get_two_node, get_ch3, get_student, get_bishop, NETWORKS


__all__ = [
    "Node",
    "BayesianNetwork",
    "AncestralSampler",
    "GibbsSampler",
    "markov_blanket_sample",
    "NetworkStat",
    "StatMap",
    "BNError",
    "DuplicateNodeError",
    "MissingNodeError",
    "CPTDimensionError",
    "CycleError",
    "UnsetAssignmentError",
    "CPTKeyError",
    "InvalidArgumentError",
    "get_two_node",
    "get_ch3",
    "get_student",
    "get_bishop",
    "NETWORKS",
]
