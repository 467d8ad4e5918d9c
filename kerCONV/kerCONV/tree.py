import re

_TOKENS = re.compile(r"\(|\)|[^\s()]+")


class Tree:
    """Ordered labelled tree, as produced by constituency or dependency parsers.

    A tree is its root label plus the ordered list of its subtrees; leaves have an
    empty list of children. It can be built from the classical parenthetic form

    ``Tree(string="(NP (DT the) (JJ) (NN ball))")``

    or assembled by hand with ``Tree(root="NP", children=[...])``.

    Every node carries an integer id, unique within the tree it belongs to. Ids are
    assigned in pre-order starting from 0 when the tree is parsed; trees assembled
    by hand are numbered the first time an ordered node list is requested. Call
    :meth:`numberNodes` again after editing a tree in place.
    """

    PRODUCTION_SEPARATOR = " -> "

    def __init__(self, string=None, root=None, children=None, id=None):
        if string is not None:
            parsed = type(self)._parse(string)
            self.root = parsed.root
            self.children = parsed.children
            self._id = None
            self.numberNodes()
        else:
            if root is None:
                raise ValueError("a tree needs either a parenthetic string or a root label")
            self.root = root
            self.children = list(children) if children is not None else []
            self._id = id
            self._byProduction = None
            self._byLabel = None

    @classmethod
    def _parse(cls, string):
        tokens = _TOKENS.findall(string)
        if not tokens:
            raise ValueError("empty tree string")

        stack = []
        result = None
        open_label = False
        for token in tokens:
            if result is not None:
                raise ValueError(f"unexpected text after the end of the tree: {string!r}")
            if token == "(":
                if open_label:
                    raise ValueError(f"missing label after '(': {string!r}")
                open_label = True
            elif token == ")":
                if open_label or not stack:
                    raise ValueError(f"unbalanced parentheses: {string!r}")
                node = stack.pop()
                if stack:
                    stack[-1].children.append(node)
                else:
                    result = node
            elif open_label:
                stack.append(cls(root=token))
                open_label = False
            elif stack:
                stack[-1].children.append(cls(root=token))
            else:
                result = cls(root=token)

        if open_label or stack:
            raise ValueError(f"unbalanced parentheses: {string!r}")
        return result

    def id(self):
        return self._id

    def hasChildren(self):
        return len(self.children) > 0

    def isTerminal(self):
        return len(self.children) == 0

    def isPreTerminal(self):
        return len(self.children) == 1 and self.children[0].isTerminal()

    def production(self):
        """The root label followed by the labels of the immediate children.

        Two nodes can root the same subtree fragment only if their productions are
        equal, e.g. ``NP -> DT NN`` for ``(NP (DT the) (NN ball))``. The production of
        a leaf is its label. The separator holds blanks, which parsed labels cannot
        contain, so a leaf never shares its production with an internal node.
        """
        if not self.children:
            return self.root
        return self.root + Tree.PRODUCTION_SEPARATOR + " ".join(c.root for c in self.children)

    def allNodes(self):
        """All the nodes of the tree in pre-order, this node first."""
        nodes = []
        stack = [self]
        while stack:
            node = stack.pop()
            nodes.append(node)
            stack.extend(reversed(node.children))
        return nodes

    def numberNodes(self, start=0):
        for i, node in enumerate(self.allNodes(), start):
            node._id = i
            node._byProduction = None
            node._byLabel = None

    def _numberedNodes(self):
        nodes = self.allNodes()
        ids = [n._id for n in nodes]
        if None in ids or len(set(ids)) != len(ids):
            self.numberNodes()
        return nodes

    def orderedNodesByProduction(self):
        """All the nodes sorted by production string.

        Ids are checked at every call: a node shared with another tree may have been
        renumbered by it, in which case this tree is numbered again.
        """
        nodes = self._numberedNodes()
        if self._byProduction is None:
            self._byProduction = sorted(nodes, key=lambda n: n.production())
        return self._byProduction

    def orderedNodesByLabel(self):
        """All the nodes sorted by root label."""
        nodes = self._numberedNodes()
        if self._byLabel is None:
            self._byLabel = sorted(nodes, key=lambda n: n.root)
        return self._byLabel

    def size(self):
        return len(self.allNodes())

    def depth(self):
        depth = 0
        level = [self]
        while level:
            depth += 1
            level = [c for n in level for c in n.children]
        return depth

    def __str__(self):
        parts = []
        stack = [(self, True)]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            node, top = item
            if node.isTerminal() and not top:
                parts.append(node.root)
                continue
            parts.append("(" + node.root)
            stack.append(")")
            for child in reversed(node.children):
                stack.append((child, False))
                stack.append(" ")
        return "".join(parts)

    def __repr__(self):
        return f"Tree(string={str(self)!r})"

    def __eq__(self, other):
        if not isinstance(other, Tree):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))
