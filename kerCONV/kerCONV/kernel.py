from abc import ABCMeta, abstractmethod

from kerCONV.example import Example
from kerCONV.exceptions import RepresentationError


class Kernel(metaclass=ABCMeta):
    """Kernel function computed directly on one representation of two examples.

    :math:`K(a, b)` is evaluated on the representations named
    ``representation`` of the two examples, which must be instances of
    :attr:`representationType`. Representations can also be given directly,
    without wrapping them in an :class:`Example`.

    :param representation: identifier of the representation the kernel reads
    """

    kernelType = None
    representationType = object

    def __init__(self, representation="0"):
        self.representation = representation

    def getRepresentation(self, example):
        if isinstance(example, Example):
            rep = example.getRepresentation(self.representation)
        else:
            rep = example
        if not isinstance(rep, self.representationType):
            raise RepresentationError(
                f"{type(self).__name__} works on {self.representationType.__name__} representations, "
                f"got {type(rep).__name__} for {self.representation!r}"
            )
        return rep

    def evaluate(self, a, b):
        """the unnormalized kernel value between two examples

        :param a: an :class:`Example` or directly a representation
        :param b: an :class:`Example` or directly a representation
        :return: :math:`K(a, b)` as a float
        """
        return float(self.kernelComputation(self.getRepresentation(a), self.getRepresentation(b)))

    @abstractmethod
    def kernelComputation(self, repA, repB):
        return None

    @abstractmethod
    def toConfig(self):
        """the configuration dictionary rebuilding this kernel (see :mod:`kerCONV.config`)"""
        return None
