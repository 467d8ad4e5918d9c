import logging

import numpy as np

from kerCONV.deltamatrix import DeltaMatrix, DynamicDeltaMatrix
from kerCONV.kernel import Kernel
from kerCONV.tree import Tree
from kerCONV.treekernel import pairNodes

logger = logging.getLogger(__name__)


def _label(node):
    return node.root


class PartialTreeKernel(Kernel):
    """Partial Tree Kernel of `Moschitti (2006)`_.

    The evaluation of the common PTs rooted in nodes n1 and n2 requires the selection of
    the shared child subsets of the two nodes. For example (S (DT JJ N)) and (S (DT N N))
    have (S [N]) (2 times) and (S [DT N]) in common. The kernel is

    .. math:: K(T_1, T_2) = \\sum_{n_1 \\in N_{T_1}} \\sum_{n_2 \\in N_{T_2}} \\Delta(n_1, n_2)

    where :math:`\\Delta(n_1, n_2) = 0` if the labels of the two nodes differ,
    :math:`\\mu \\lambda^2` if one of them is a leaf and otherwise

    .. math:: \\Delta(n_1, n_2) = \\mu \\Big(\\lambda^2 + \\sum_{p=1}^{l_m} \\Delta_p(c_{n_1}, c_{n_2})\\Big)

    :math:`\\Delta_p` summing over the pairs of child subsequences of length :math:`p` with
    equal labels, penalized by :math:`\\lambda` for every gap.

.. _Moschitti (2006): https://doi.org/10.1007/11871842_32

    :param LAMBDA: the decay factor :math:`\\lambda` of child subsequences
    :param MU: the decay factor :math:`\\mu` of the height of the fragments
    :param representation: identifier of the tree representation in the examples
    :param deltaMatrix: the cache of :math:`\\Delta`, a :class:`DynamicDeltaMatrix` if None
    """

    kernelType = "ptk"
    representationType = Tree

    def __init__(self, LAMBDA=0.4, MU=0.4, representation="0", deltaMatrix=None):
        super().__init__(representation)
        if not 0 < LAMBDA <= 1:
            raise ValueError(f"LAMBDA must be in (0, 1], got {LAMBDA}")
        if not 0 < MU <= 1:
            raise ValueError(f"MU must be in (0, 1], got {MU}")
        self.LAMBDA = LAMBDA
        self.MU = MU
        self.deltaMatrix = deltaMatrix if deltaMatrix is not None else DynamicDeltaMatrix()

    def kernelComputation(self, a, b):
        self.deltaMatrix.clear()

        pairs = pairNodes(a.orderedNodesByLabel(), b.orderedNodesByLabel(), _label)
        for n1, n2 in pairs:
            self.deltaMatrix.add(n1.id(), n2.id(), DeltaMatrix.NO_RESPONSE)
        logger.debug("ptk: %d candidate pairs", len(pairs))

        sim = 0.
        for n1, n2 in pairs:
            sim += self.delta(n1, n2)
        return sim

    def delta(self, t1: Tree, t2: Tree):
        cached = self.deltaMatrix.get(t1.id(), t2.id())
        if cached is not DeltaMatrix.NO_RESPONSE:
            return cached

        if t1.isTerminal() or t2.isTerminal():
            value = self.MU * self.LAMBDA ** 2
        else:
            value = self.MU * (self.LAMBDA ** 2 + self.delta_sk(t1.children, t2.children))

        self.deltaMatrix.add(t1.id(), t2.id(), value)
        return value

    def delta_sk(self, t1_children, t2_children):
        """:math:`\\sum_p \\Delta_p` over the two children lists, by dynamic programming."""
        n = len(t1_children)
        m = len(t2_children)
        lam = self.LAMBDA

        DPS = np.zeros(shape=(n + 1, m + 1), dtype=float)
        DP = np.zeros(shape=(n + 1, m + 1), dtype=float)
        p = min(n, m)
        kernel_mat = np.zeros(shape=p, dtype=float)

        for i in range(1, n + 1):
            for j in range(1, m + 1):
                if t1_children[i - 1].root == t2_children[j - 1].root:
                    DPS[i, j] = self.delta(t1_children[i - 1], t2_children[j - 1])
                    kernel_mat[0] += DPS[i, j]

        for l in range(1, p):
            DP[:, l - 1] = 0
            DP[l - 1, :] = 0

            for i in range(l, n + 1):
                for j in range(l, m + 1):
                    DP[i, j] = DPS[i, j] + lam * DP[i - 1, j] + lam * DP[i, j - 1] - lam * lam * DP[i - 1, j - 1]

                    if t1_children[i - 1].root == t2_children[j - 1].root:
                        DPS[i, j] = self.delta(t1_children[i - 1], t2_children[j - 1]) * DP[i - 1, j - 1]
                        kernel_mat[l] += DPS[i, j]

        return float(kernel_mat.sum())

    def toConfig(self):
        return {
            "kernelType": self.kernelType,
            "decayFactor": self.LAMBDA,
            "mu": self.MU,
            "representationIdentifier": self.representation,
            "cacheBackend": self.deltaMatrix.toConfig(),
        }
