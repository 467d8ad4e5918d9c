import json
import logging

from stanfordcorenlp import StanfordCoreNLP

from kerCONV.tree import Tree

logger = logging.getLogger(__name__)

CORENLP_HOME = r'./stanford-corenlp-full-2018-10-05'

FALLBACK = {'parse': '(S)', 'depparse': '(ROOT)'}


def parse(text, nlp=None, annotator='parse', pos_tags=False, tokens_as_leaves=True):
    """parses free text with Stanford CoreNLP

    :param text: free-format text
    :param nlp: a ``StanfordCoreNLP`` client, one on :data:`CORENLP_HOME` if None
    :param annotator: ``parse`` for constituency trees, ``depparse`` for dependency trees
    :param pos_tags: (depparse) put the POS tag between the relation and the token
    :param tokens_as_leaves: (depparse) tokens are leaves and dependents hang from the
        relation node; otherwise dependents hang from the token
    :return: tree in parenthetic form; ``(S)`` or ``(ROOT)`` if the parser fails
    """
    if annotator not in FALLBACK:
        raise ValueError(f"unknown annotator {annotator!r}, expected one of {sorted(FALLBACK)}")
    if nlp is None:
        nlp = StanfordCoreNLP(CORENLP_HOME)

    try:
        output = nlp.annotate(text, properties={'annotators': annotator, 'outputFormat': 'json'})
        sentences = json.loads(output)['sentences']
    except Exception as e:
        logger.warning("parser failure on %r, falling back to %s: %s", text, FALLBACK[annotator], e)
        return FALLBACK[annotator]
    if not sentences:
        logger.warning("no sentence found in %r, falling back to %s", text, FALLBACK[annotator])
        return FALLBACK[annotator]

    if annotator == 'parse':
        trees = [_strip_root(Tree(string=s['parse'])) for s in sentences]
        if len(trees) == 1:
            return str(trees[0])
        return str(Tree(root="S", children=trees))

    trees = [DependencyTree(s, pos_tags=pos_tags).tree(tokens_as_leaves=tokens_as_leaves) for s in sentences]
    if len(trees) == 1:
        return str(trees[0])
    return str(Tree(root="ROOT", children=trees))


def parse_tree(text, nlp=None, **kwargs):
    return Tree(string=parse(text, nlp=nlp, **kwargs))


def _strip_root(tree):
    if tree.root == "ROOT" and len(tree.children) == 1:
        return tree.children[0]
    return tree


class DependencyTree:
    """Turns the basic dependencies of a CoreNLP sentence into a tree.

    Every word becomes a node labelled with its relation to the governor, e.g.
    ``(nsubj (cat) (det (the)))``; dependents are sorted by relation.
    """

    def __init__(self, sentence, pos_tags=False):
        self.tokens = {t['index']: t for t in sentence['tokens']}
        dependencies = sentence['basicDependencies']
        self.relations = {d['dependent']: d['dep'] for d in dependencies}
        self.dependents = {}
        for d in sorted(dependencies, key=lambda d: d['dep']):
            self.dependents.setdefault(d['governor'], []).append(d['dependent'])
        self.pos_tags = pos_tags

    def tree(self, tokens_as_leaves=True) -> Tree:
        heads = self.dependents.get(0)
        if not heads:
            raise ValueError("dependency parse without a root word")
        return self._tree(heads[0], tokens_as_leaves)

    def _tree(self, index, tokens_as_leaves):
        token = self.tokens[index]
        word = Tree(root=token['word'])
        lexical = Tree(root=token['pos'], children=[word]) if self.pos_tags else word
        node = Tree(root=self.relations[index], children=[lexical])

        attach_to = node if tokens_as_leaves else word
        for dependent in self.dependents.get(index, []):
            attach_to.children.append(self._tree(dependent, tokens_as_leaves))
        return node
