from kerCONV.exceptions import RepresentationError


class Example:
    """A learning instance described by several named representations.

    Kernels read one of them, selected by the representation identifier they were
    built with: e.g. a constituency ``Tree`` under ``"tree"`` and the token
    ``Sequence`` of the same sentence under ``"words"``.
    """

    def __init__(self, representations=None):
        self.representations = dict(representations or {})

    def addRepresentation(self, name, representation):
        self.representations[name] = representation

    def getRepresentation(self, name):
        try:
            return self.representations[name]
        except KeyError:
            raise RepresentationError(
                f"no representation {name!r} in example (available: {list(self.representations)})"
            ) from None

    def representationNames(self):
        return list(self.representations)

    def __repr__(self):
        return f"Example({self.representations!r})"
