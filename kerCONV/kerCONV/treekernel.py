import logging

from kerCONV.deltamatrix import DeltaMatrix, StaticDeltaMatrix
from kerCONV.kernel import Kernel
from kerCONV.tree import Tree

logger = logging.getLogger(__name__)


def pairNodes(nodesA, nodesB, key):
    """Pairs the nodes of two lists sorted on ``key`` whose keys are equal.

    The two lists are merged as in a merge sort: the cursor on the smaller key moves
    forward and, on equal keys, every node of the run of equal keys in ``nodesA`` is
    paired with every node of the matching run in ``nodesB``. Nodes whose key never
    appears in the other list cost nothing beyond the scan [Moschitti, EACL 2006].

    :param nodesA: nodes of the first tree, sorted by ``key``
    :param nodesB: nodes of the second tree, sorted by ``key``
    :param key: function from a node to a comparable string
    :return: list of node pairs ``(a, b)`` with ``key(a) == key(b)``
    """
    pairs = []
    i, j = 0, 0
    n_a, n_b = len(nodesA), len(nodesB)
    while i < n_a and j < n_b:
        ka, kb = key(nodesA[i]), key(nodesB[j])
        if ka > kb:
            j += 1
        elif ka < kb:
            i += 1
        else:
            i_end = i
            while i_end < n_a and key(nodesA[i_end]) == ka:
                i_end += 1
            j_end = j
            while j_end < n_b and key(nodesB[j_end]) == ka:
                j_end += 1
            for a in nodesA[i:i_end]:
                for b in nodesB[j:j_end]:
                    pairs.append((a, b))
            i, j = i_end, j_end
    return pairs


class SubTreeKernel(Kernel):
    """SubTree Kernel (in its subset-tree form) of `Collins\\&Duffy (2001)`_.

    It counts the tree fragments shared by two trees, a fragment being any subtree rooted
    in a node with the only constraint that, if a node is in the fragment, all its
    siblings are in the fragment too:

    .. math:: K(T_1, T_2) = \\sum_{n_1 \\in N_{T_1}} \\sum_{n_2 \\in N_{T_2}} \\Delta(n_1, n_2)

    where :math:`\\Delta(n_1, n_2) = 0` if the productions of :math:`n_1` and :math:`n_2`
    differ, :math:`\\lambda` if they are leaves or pre-terminals, and otherwise

    .. math:: \\Delta(n_1, n_2) = \\lambda \\prod_{j} (1 + \\Delta(c^j_{n_1}, c^j_{n_2}))

    over the children positions :math:`j` where both children are internal nodes with equal
    productions. Each shared fragment is thus weighted :math:`\\lambda^n`, :math:`n` being the
    number of its internal nodes.

    Only node pairs with equal productions are visited (see :func:`pairNodes`) and the
    values of :math:`\\Delta` are memoized in ``deltaMatrix``, which is cleared at every
    evaluation: an instance must not be used by two threads at the same time.

.. _Collins\\&Duffy (2001): https://dl.acm.org/doi/10.5555/2980539.2980621

    :param LAMBDA: the decay factor :math:`\\lambda \\in (0, 1]` penalizing large fragments
    :param representation: identifier of the tree representation in the examples
    :param deltaMatrix: the cache of :math:`\\Delta`, a :class:`StaticDeltaMatrix` of the default size if None
    """

    kernelType = "stk"
    representationType = Tree

    def __init__(self, LAMBDA=0.4, representation="0", deltaMatrix=None):
        super().__init__(representation)
        if not 0 < LAMBDA <= 1:
            raise ValueError(f"LAMBDA must be in (0, 1], got {LAMBDA}")
        self.LAMBDA = LAMBDA
        self.deltaMatrix = deltaMatrix if deltaMatrix is not None else StaticDeltaMatrix()

    def kernelComputation(self, a, b):
        self.deltaMatrix.clear()

        pairs = self.determineSubList(a, b)
        logger.debug("stk: %d candidate pairs out of %d x %d nodes",
                     len(pairs), len(a.orderedNodesByProduction()), len(b.orderedNodesByProduction()))

        k = 0.
        for nx, nz in pairs:
            k += self.delta(nx, nz)
        return k

    def determineSubList(self, a: Tree, b: Tree):
        """the node pairs with equal productions, registered as pending in the delta matrix"""
        pairs = pairNodes(a.orderedNodesByProduction(), b.orderedNodesByProduction(),
                          lambda n: n.production())
        for nx, nz in pairs:
            self.deltaMatrix.add(nx.id(), nz.id(), DeltaMatrix.NO_RESPONSE)
        return pairs

    @staticmethod
    def _matchingChildren(nx: Tree, nz: Tree):
        return [(cx, cz) for cx, cz in zip(nx.children, nz.children)
                if cx.hasChildren() and cz.hasChildren() and cx.production() == cz.production()]

    def delta(self, nx: Tree, nz: Tree):
        """:math:`\\Delta(n_x, n_z)` for two nodes with equal productions.

        The recursion on the children is unrolled on an explicit stack, so the depth
        of the trees is not bounded by the interpreter's recursion limit.
        """
        matrix = self.deltaMatrix
        cached = matrix.get(nx.id(), nz.id())
        if cached is not DeltaMatrix.NO_RESPONSE:
            return cached

        stack = [(nx, nz, False)]
        while stack:
            x, z, expanded = stack.pop()
            if matrix.get(x.id(), z.id()) is not DeltaMatrix.NO_RESPONSE:
                continue
            children = SubTreeKernel._matchingChildren(x, z)
            if not expanded:
                stack.append((x, z, True))
                stack.extend((cx, cz, False) for cx, cz in children)
            else:
                prod = 1.
                for cx, cz in children:
                    prod *= 1. + matrix.get(cx.id(), cz.id())
                matrix.add(x.id(), z.id(), self.LAMBDA * prod)

        return matrix.get(nx.id(), nz.id())

    def substructures(self, tree: Tree):
        """all the fragments of ``tree`` counted by the kernel, with their weights.

        Fragments are listed once per node they are rooted in, so that

        .. math:: K(T_1, T_2) = \\sum_{f} c_{T_1}(f) c_{T_2}(f) \\lambda^{n_f}

        The number of fragments grows exponentially with the size of the tree: this is
        meant for inspecting small trees.

        :param tree: the tree fragments are extracted from
        :return: list of ``(fragment, weight)`` pairs
        """
        rooted = {}
        fragments = []
        for node in reversed(tree.allNodes()):
            if node.isTerminal():
                in_node = [(Tree(root=node.root), 1)]
            else:
                combos = [([], 1)]
                for child in node.children:
                    options = [(Tree(root=child.root), 0)]
                    if child.hasChildren():
                        options.extend(rooted[id(child)])
                    combos = [(kids + [f], size + s) for kids, size in combos for f, s in options]
                in_node = [(Tree(root=node.root, children=kids), size) for kids, size in combos]
            rooted[id(node)] = in_node
            fragments.extend(in_node)
        return [(f, self.LAMBDA ** size) for f, size in fragments]

    def toConfig(self):
        return {
            "kernelType": self.kernelType,
            "decayFactor": self.LAMBDA,
            "representationIdentifier": self.representation,
            "cacheBackend": self.deltaMatrix.toConfig(),
        }
