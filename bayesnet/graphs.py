from .network import BayesianNetwork
from .node import Node


def get_two_node(p_root=0.5):
    # X1 -> X2
    x1 = Node.root("X1", p_root)
    x2 = Node("X2", ["X1"], {"T": 0.1, "F": 0.5})
    return BayesianNetwork(x1, x2)


def get_ch3():
    """
    R -> J, (R, S) -> T with deterministic entries.
    """
    r = Node.root("R", 0.8)
    s = Node.root("S", 0.4)

    j = Node("J", ["R"], {"T": 1.0, "F": 0.2})
    t = Node("T", ["R", "S"], {
        "TF": 1.0,
        "TT": 1.0,
        "FT": 0.9,
        "FF": 0.0,
    })

    return BayesianNetwork(r, s, j, t)


def get_student():
    """
    Student network: E, I, D -> P; I, D -> R; P -> J; P, R -> U.
    """
    e = Node.root("E", 0.3)
    i = Node.root("I", 0.7)
    d = Node.root("D", 0.2)

    p = Node("P", ["E", "I", "D"], {
        "TTT": 0.9,
        "TFF": 0.2,
        "TTF": 0.5,
        "TFT": 0.7,
        "FTT": 0.8,
        "FFF": 0.07,
        "FTF": 0.6,
        "FFT": 0.7,
    })

    r = Node("R", ["I", "D"], {
        "TT": 0.9,
        "FF": 0.2,
        "TF": 0.6,
        "FT": 0.9,
    })

    j = Node("J", ["P"], {"T": 0.7, "F": 0.3})

    u = Node("U", ["P", "R"], {
        "TT": 0.9,
        "FF": 0.3,
        "TF": 0.6,
        "FT": 0.8,
    })

    return BayesianNetwork(e, i, d, p, r, j, u)


def get_bishop(p_root=0.7):
    """
    Bishop, PRML p. 362, fig. 8.2.
    """
    x1 = Node.root("X1", p_root)
    x2 = Node.root("X2", p_root)
    x3 = Node.root("X3", p_root)

    pair = {
        "TT": 0.9,
        "FF": 0.2,
        "TF": 0.2,
        "FT": 0.09,
    }

    x4 = Node("X4", ["X1", "X2", "X3"], {
        "TTT": 0.2,
        "TFF": 0.3,
        "TTF": 0.6,
        "TFT": 0.7,
        "FTT": 0.1,
        "FFF": 0.8,
        "FTF": 0.3,
        "FFT": 0.6,
    })
    x5 = Node("X5", ["X1", "X3"], pair)
    x6 = Node("X6", ["X4"], {"T": 0.1, "F": 0.7})
    x7 = Node("X7", ["X4", "X5"], pair)

    return BayesianNetwork(x1, x2, x3, x4, x5, x6, x7)


NETWORKS = {
    "two-node": get_two_node,
    "ch3": get_ch3,
    "student": get_student,
    "bishop": get_bishop,
}
