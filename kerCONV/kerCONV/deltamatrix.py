from abc import ABCMeta, abstractmethod

import numpy as np

from kerCONV.exceptions import CapacityError


class DeltaMatrix(metaclass=ABCMeta):
    """Cache of the delta function of a tree kernel.

    It maps an ordered pair of node ids :math:`(i, j)`, :math:`i` from the first tree
    and :math:`j` from the second, to the value :math:`\\Delta(n_i, n_j)` once it has
    been computed. A pair that has no value yet reads as :attr:`NO_RESPONSE`.
    The two trees are two independent id spaces.

    A delta matrix belongs to one kernel, which clears it at the beginning of every
    evaluation: it holds no state across evaluations and must not be shared by
    evaluations running at the same time.
    """

    NO_RESPONSE = None

    @abstractmethod
    def add(self, i, j, v):
        """stores :math:`v` for the pair :math:`(i, j)`; ``NO_RESPONSE`` marks the pair as pending.

        :param i: node id in the first tree
        :param j: node id in the second tree
        :param v: the delta value, or ``NO_RESPONSE``
        """

    @abstractmethod
    def get(self, i, j):
        """
        :return: the value stored for :math:`(i, j)` or ``NO_RESPONSE``
        """

    @abstractmethod
    def clear(self):
        """forgets every stored value."""

    @abstractmethod
    def toConfig(self):
        return None


class StaticDeltaMatrix(DeltaMatrix):
    """Dense square matrix sized on the largest node id it has to hold.

    Fast, but every node id must be in ``[0, capacity)``: other ids raise
    :class:`CapacityError`. A boolean mask next to the values tells computed
    cells from pending or never written ones.

    :param capacity: number of node ids per tree the matrix can hold
    """

    DEFAULT_SIZE = 200

    def __init__(self, capacity=DEFAULT_SIZE):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.matrix = np.zeros(shape=(capacity, capacity), dtype=float)
        self.valid = np.zeros(shape=(capacity, capacity), dtype=bool)

    def _check(self, i, j):
        if not 0 <= i < self.capacity:
            raise CapacityError(i, self.capacity)
        if not 0 <= j < self.capacity:
            raise CapacityError(j, self.capacity)

    def add(self, i, j, v):
        self._check(i, j)
        if v is DeltaMatrix.NO_RESPONSE:
            self.valid[i, j] = False
        else:
            self.matrix[i, j] = v
            self.valid[i, j] = True

    def get(self, i, j):
        self._check(i, j)
        if self.valid[i, j]:
            return float(self.matrix[i, j])
        return DeltaMatrix.NO_RESPONSE

    def clear(self):
        self.valid.fill(False)

    def toConfig(self):
        return {"type": "static", "capacity": self.capacity}


class DynamicDeltaMatrix(DeltaMatrix):
    """Sparse matrix: a dict of dicts, growing with the ids it is given.

    No bound on node ids, at a higher cost per access than :class:`StaticDeltaMatrix`.
    """

    def __init__(self):
        self.matrix = {}

    def add(self, i, j, v):
        if v is DeltaMatrix.NO_RESPONSE:
            row = self.matrix.get(i)
            if row is not None:
                row.pop(j, None)
        else:
            self.matrix.setdefault(i, {})[j] = v

    def get(self, i, j):
        row = self.matrix.get(i)
        if row is None:
            return DeltaMatrix.NO_RESPONSE
        return row.get(j, DeltaMatrix.NO_RESPONSE)

    def clear(self):
        self.matrix.clear()

    def toConfig(self):
        return {"type": "dynamic"}
