import logging

import numpy as np

from kerCONV.kernel import Kernel
from kerCONV.sequence import Sequence

logger = logging.getLogger(__name__)


class SequenceKernel(Kernel):
    """Gapped subsequence kernel of `Lodhi et al. (2002)`_ on sequences of elements.

    It counts the common subsequences of length 1 to :math:`n` of two sequences,
    each occurrence weighted by :math:`\\lambda` to the total span it covers in the two
    sequences, so that gaps are penalized. It is computed by the dynamic program

    .. math:: K'_0(s, t) = 1, \\quad K''_{i}(sx, tu) = \\lambda K''_{i}(sx, t) + [x = u] \\lambda^2 K'_{i-1}(s, t), \\quad K'_{i}(sx, t) = \\lambda K'_{i}(s, t) + K''_{i}(sx, t)

    in :math:`O(n |s| |t|)` time and space. Two elements match when their tokens are
    equal and, if ``typed``, their contents are of the same type.

    No state is kept across evaluations.

.. _Lodhi et al. (2002): https://www.jmlr.org/papers/v2/lodhi02a.html

    :param maxSubseqLength: the maximum length :math:`n` of the subsequences
    :param LAMBDA: the gap decay factor :math:`\\lambda`
    :param representation: identifier of the sequence representation in the examples
    :param typed: whether matching elements must have contents of the same type
    """

    kernelType = "seqk"
    representationType = Sequence

    def __init__(self, maxSubseqLength=4, LAMBDA=0.75, representation="0", typed=True):
        super().__init__(representation)
        if maxSubseqLength < 0:
            raise ValueError(f"maxSubseqLength must not be negative, got {maxSubseqLength}")
        if not 0 < LAMBDA <= 1:
            raise ValueError(f"LAMBDA must be in (0, 1], got {LAMBDA}")
        self.maxSubseqLength = maxSubseqLength
        self.LAMBDA = LAMBDA
        self.typed = typed

    def elementSimilarity(self, e1, e2):
        if self.typed and e1.kind() != e2.kind():
            return 0.
        return 1. if e1.text() == e2.text() else 0.

    def similarityMatrix(self, s, t):
        return np.array([[self.elementSimilarity(x, y) for y in t] for x in s], dtype=float).reshape(len(s), len(t))

    def kernelComputation(self, a, b):
        return float(self.stringKernel(a.elements, b.elements).sum())

    def stringKernel(self, s, t):
        """the kernel values per subsequence length

        :param s: the elements of the first sequence
        :param t: the elements of the second sequence
        :return: array whose entry :math:`l` is the kernel restricted to subsequences of length :math:`l + 1`
        """
        n = self.maxSubseqLength
        lam = self.LAMBDA
        sl, tl = len(s), len(t)
        logger.debug("seqk: %d x %d elements, n=%d", sl, tl, n)

        sim = self.similarityMatrix(s, t)

        Kp = np.zeros(shape=(n + 1, sl, tl), dtype=float)
        Kp[0] = 1.

        for i in range(n):
            for j in range(sl - 1):
                Kpp = 0.
                for k in range(tl - 1):
                    Kpp = lam * (Kpp + lam * sim[j, k] * Kp[i, j, k])
                    Kp[i + 1, j + 1, k + 1] = lam * Kp[i + 1, j, k + 1] + Kpp

        K = np.zeros(shape=n, dtype=float)
        for l in range(n):
            K[l] = lam * lam * np.sum(sim * Kp[l])
        return K

    def toConfig(self):
        return {
            "kernelType": self.kernelType,
            "decayFactor": self.LAMBDA,
            "representationIdentifier": self.representation,
            "maxSubsequenceLength": self.maxSubseqLength,
            "typed": self.typed,
        }
