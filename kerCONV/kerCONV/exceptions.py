class KernelError(Exception):
    """Base class of the errors raised while evaluating a kernel."""


class CapacityError(KernelError, IndexError):
    """A node id does not fit in a bounded delta matrix.

    Either the matrix is undersized for the trees being compared or the trees
    are numbered in an unexpected way. Raised before any delta is computed.
    """

    def __init__(self, node_id, capacity):
        super().__init__(f"node id {node_id} outside delta matrix capacity {capacity}")
        self.node_id = node_id
        self.capacity = capacity


class RepresentationError(KernelError, ValueError):
    """The representation a kernel reads is missing or of the wrong kind."""
