import numpy as np

from kerCONV.kernel import Kernel


class NormalizationKernel(Kernel):
    """Cosine normalization of another kernel:

    .. math:: \\hat{K}(a, b) = \\frac{K(a, b)}{\\sqrt{K(a, a) K(b, b)}}

    which is 0 when one of the two self-similarities is 0. Nothing is cached: the
    self-similarities are recomputed at every evaluation.

    :param base: the kernel to normalize
    """

    kernelType = "norm"

    def __init__(self, base: Kernel):
        super().__init__(base.representation)
        self.base = base
        self.representationType = base.representationType

    def kernelComputation(self, repA, repB):
        k = self.base.kernelComputation(repA, repB)
        if k == 0:
            return 0.
        norm = self.base.kernelComputation(repA, repA) * self.base.kernelComputation(repB, repB)
        if norm <= 0:
            return 0.
        return k / np.sqrt(norm)

    def toConfig(self):
        return {"kernelType": self.kernelType, "baseKernel": self.base.toConfig()}


def kernel_matrix(kernel: Kernel, examplesA, examplesB=None, normalize=False):
    """the Gram matrix :math:`G_{ij} = K(a_i, b_j)`

    :param kernel: the kernel to evaluate
    :param examplesA: examples (or representations) on the rows
    :param examplesB: examples on the columns; if None, ``examplesA`` against itself,
        filling only the upper triangle and mirroring it
    :param normalize: divide every entry by :math:`\\sqrt{K(a_i, a_i) K(b_j, b_j)}`
    :return: a numpy array of shape ``(len(examplesA), len(examplesB))``
    """
    repsA = [kernel.getRepresentation(e) for e in examplesA]
    symmetric = examplesB is None
    repsB = repsA if symmetric else [kernel.getRepresentation(e) for e in examplesB]

    gram = np.zeros(shape=(len(repsA), len(repsB)), dtype=float)
    for i, a in enumerate(repsA):
        for j in range(i if symmetric else 0, len(repsB)):
            gram[i, j] = kernel.kernelComputation(a, repsB[j])
            if symmetric:
                gram[j, i] = gram[i, j]

    if normalize:
        if symmetric:
            selfA = selfB = np.diag(gram).copy()
        else:
            selfA = np.array([kernel.kernelComputation(a, a) for a in repsA], dtype=float)
            selfB = np.array([kernel.kernelComputation(b, b) for b in repsB], dtype=float)
        norm = np.sqrt(np.outer(selfA, selfB))
        gram = np.divide(gram, norm, out=np.zeros_like(gram), where=norm > 0)
    return gram
