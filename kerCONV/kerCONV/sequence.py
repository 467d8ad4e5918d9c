class LexicalElement:
    """A word together with its part of speech, written ``word::pos``."""

    SEPARATOR = "::"

    def __init__(self, word, pos):
        self.word = word
        self.pos = pos

    def textFromData(self):
        return self.word + LexicalElement.SEPARATOR + self.pos

    def __repr__(self):
        return f"LexicalElement({self.word!r}, {self.pos!r})"


class SequenceElement:
    """One position of a sequence, wrapping an arbitrary content object."""

    def __init__(self, content):
        self.content = content

    def text(self):
        """The token compared by the sequence kernels."""
        if hasattr(self.content, "textFromData"):
            return self.content.textFromData()
        return str(self.content)

    def kind(self):
        return type(self.content)

    def __repr__(self):
        return f"SequenceElement({self.content!r})"


class Sequence:
    """An ordered list of :class:`SequenceElement`.

    ``Sequence(string="the::d cat::n sleeps::v")`` splits on whitespace and turns
    ``word::pos`` tokens into :class:`LexicalElement` contents; other tokens are
    kept as plain strings.
    """

    def __init__(self, elements=None, string=None):
        if string is not None:
            elements = [Sequence._content(token) for token in string.split()]
        self.elements = [e if isinstance(e, SequenceElement) else SequenceElement(e)
                         for e in (elements or [])]

    @staticmethod
    def _content(token):
        word, sep, pos = token.rpartition(LexicalElement.SEPARATOR)
        if sep and word and pos:
            return LexicalElement(word, pos)
        return token

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def __getitem__(self, i):
        return self.elements[i]

    def __str__(self):
        return " ".join(e.text() for e in self.elements)

    def __repr__(self):
        return f"Sequence(string={str(self)!r})"
