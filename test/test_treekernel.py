from collections import Counter

import pytest

from kerCONV.deltamatrix import DynamicDeltaMatrix, StaticDeltaMatrix
from kerCONV.example import Example
from kerCONV.exceptions import CapacityError, RepresentationError
from kerCONV.sequence import Sequence
from kerCONV.tree import Tree
from kerCONV.treekernel import SubTreeKernel, pairNodes

S1 = "(FRAG (NP (NNP Bob)) (VP (VB read) (NP (DT a) (NN message))))"
S2 = "(FRAG (NP (NNP Bob)) (VP (VB send) (NP (DT a) (NN message))))"
S3 = "(S (NP (DT The) (NN wait) (NN time)) (VP (AUX has) (VP (VBN risen))) (. .))"
S4 = "(S (NP (DT the) (NN cat)) (VP (VBZ sleeps) (PP (IN on) (NP (DT the) (NN table)))))"


def explicit_kernel(kernel, t1, t2):
    """the kernel value computed in the space of fragments"""
    sub_t1 = kernel.substructures(t1)
    sub_t2 = kernel.substructures(t2)
    count_1 = Counter(str(f) for f, _ in sub_t1)
    count_2 = Counter(str(f) for f, _ in sub_t2)
    weights = {str(f): w for f, w in sub_t1}
    return sum(count_1[f] * count_2[f] * weights[f] for f in count_1.keys() & count_2.keys())


@pytest.fixture(params=["static", "dynamic"])
def delta_matrix(request):
    if request.param == "static":
        return StaticDeltaMatrix()
    return DynamicDeltaMatrix()


class TestPairNodes:

    def test_cross_product_of_equal_runs(self):
        a = ["a", "b", "b", "d"]
        b = ["b", "b", "b", "c", "d"]
        pairs = pairNodes(a, b, key=lambda x: x)
        assert len(pairs) == 2 * 3 + 1
        assert all(x == y for x, y in pairs)

    def test_nothing_in_common(self):
        assert pairNodes(["a", "c"], ["b", "d"], key=lambda x: x) == []

    def test_empty(self):
        assert pairNodes([], ["a"], key=lambda x: x) == []


class TestSubTreeKernel:

    def test_single_node_trees(self, delta_matrix):
        kernel = SubTreeKernel(LAMBDA=0.4, deltaMatrix=delta_matrix)
        assert kernel.evaluate(Tree(string="(X)"), Tree(string="(X)")) == pytest.approx(0.4)

    def test_noun_phrase_with_itself(self, delta_matrix):
        t = Tree(string="(NP (DT the) (NN cat))")
        # 4 fragments rooted in NP, 1 in DT, 1 in NN and the two words
        assert SubTreeKernel(LAMBDA=1., deltaMatrix=delta_matrix).evaluate(t, t) == pytest.approx(8.)
        # 4 x 0.4 + 0.4 * 1.4 * 1.4
        assert SubTreeKernel(LAMBDA=0.4, deltaMatrix=delta_matrix).evaluate(t, t) == pytest.approx(2.384)

    def test_default_lambda(self):
        assert SubTreeKernel().LAMBDA == 0.4

    def test_disjoint_productions(self, delta_matrix):
        kernel = SubTreeKernel(deltaMatrix=delta_matrix)
        assert kernel.evaluate(Tree(string="(A (B c))"), Tree(string="(D (E f))")) == 0.

    def test_same_labels_different_productions(self):
        kernel = SubTreeKernel(LAMBDA=1.)
        # only the leaves b and c match
        assert kernel.evaluate(Tree(string="(A b c)"), Tree(string="(A c b)")) == pytest.approx(2.)

    @pytest.mark.parametrize("s1, s2", [(S1, S2), (S1, S3), (S3, S4), (S4, S4)])
    def test_symmetry(self, delta_matrix, s1, s2):
        kernel = SubTreeKernel(LAMBDA=0.6, deltaMatrix=delta_matrix)
        t1, t2 = Tree(string=s1), Tree(string=s2)
        assert kernel.evaluate(t1, t2) == pytest.approx(kernel.evaluate(t2, t1))

    @pytest.mark.parametrize("s", [S1, S3, S4, "(X)"])
    def test_self_similarity_is_positive(self, s):
        t = Tree(string=s)
        assert SubTreeKernel().evaluate(t, t) > 0

    @pytest.mark.parametrize("LAMBDA", [1., 0.5, 0.4])
    @pytest.mark.parametrize("s1, s2", [(S1, S2), (S1, S1), (S3, S4)])
    def test_equals_count_in_fragment_space(self, LAMBDA, s1, s2):
        kernel = SubTreeKernel(LAMBDA=LAMBDA)
        t1, t2 = Tree(string=s1), Tree(string=s2)
        assert kernel.evaluate(t1, t2) == pytest.approx(explicit_kernel(kernel, t1, t2))

    def test_decay_monotonicity(self):
        t1, t2 = Tree(string=S1), Tree(string=S2)
        values = [SubTreeKernel(LAMBDA=l).evaluate(t1, t2) for l in (0.1, 0.3, 0.6, 0.9, 1.)]
        assert values == sorted(values)

    def test_backends_agree(self):
        t1, t2 = Tree(string=S3), Tree(string=S4)
        static = SubTreeKernel(deltaMatrix=StaticDeltaMatrix()).evaluate(t1, t2)
        dynamic = SubTreeKernel(deltaMatrix=DynamicDeltaMatrix()).evaluate(t1, t2)
        assert static == pytest.approx(dynamic)

    def test_cache_isolation(self, delta_matrix):
        kernel = SubTreeKernel(LAMBDA=0.5, deltaMatrix=delta_matrix)
        first = kernel.evaluate(Tree(string=S1), Tree(string=S2))
        second = kernel.evaluate(Tree(string=S3), Tree(string=S4))

        assert first == pytest.approx(SubTreeKernel(LAMBDA=0.5).evaluate(Tree(string=S1), Tree(string=S2)))
        assert second == pytest.approx(SubTreeKernel(LAMBDA=0.5).evaluate(Tree(string=S3), Tree(string=S4)))

    def test_capacity_error(self):
        t = Tree(string=S4)
        kernel = SubTreeKernel(deltaMatrix=StaticDeltaMatrix(capacity=5))
        with pytest.raises(CapacityError):
            kernel.evaluate(t, t)

    def test_capacity_is_enough(self):
        t = Tree(string=S4)
        kernel = SubTreeKernel(deltaMatrix=StaticDeltaMatrix(capacity=t.size()))
        assert kernel.evaluate(t, t) > 0

    def test_deep_trees(self):
        depth = 3000
        s = "".join(f"(L{i} " for i in range(depth + 1)) + "x" + ")" * (depth + 1)
        t = Tree(string=s)
        kernel = SubTreeKernel(LAMBDA=1., deltaMatrix=DynamicDeltaMatrix())
        # delta of the node at level i is depth - i + 1, the leaf adds 1
        assert kernel.evaluate(t, t) == (depth + 1) * (depth + 2) / 2 + 1

    def test_subtree_shared_with_another_tree(self, delta_matrix):
        kernel = SubTreeKernel(LAMBDA=0.5, deltaMatrix=delta_matrix)
        parsed = Tree(string="(S (A (B b)) (C c))")
        before = kernel.evaluate(parsed, parsed)

        other = Tree(root="X", children=[parsed.children[1]])
        kernel.evaluate(other, other)

        assert kernel.evaluate(parsed, parsed) == pytest.approx(before)
        assert before == pytest.approx(SubTreeKernel(LAMBDA=0.5).evaluate(Tree(string="(S (A (B b)) (C c))"),
                                                                           Tree(string="(S (A (B b)) (C c))")))

    def test_children_lists_of_different_length(self, delta_matrix):
        class LabelTree(Tree):
            """productions made of the root label only"""

            def production(self):
                return self.root

        t1, t2 = LabelTree(string="(A (B x) (C y))"), LabelTree(string="(A (B x))")
        kernel = SubTreeKernel(LAMBDA=0.5, deltaMatrix=delta_matrix)
        # Delta(A, A) = 0.5 * (1 + Delta(B, B)), plus Delta(B, B) and Delta(x, x)
        assert kernel.evaluate(t1, t2) == pytest.approx(0.75 + 0.5 + 0.5)
        assert kernel.evaluate(t2, t1) == pytest.approx(1.75)

    def test_leaf_label_looking_like_a_production(self):
        kernel = SubTreeKernel(LAMBDA=1.)
        assert kernel.evaluate(Tree(string="(A B)"), Tree(string="(Y A->B)")) == 0.

    def test_deep_tree_string(self):
        depth = 3000
        s = "".join(f"(L{i} " for i in range(depth + 1)) + "x" + ")" * (depth + 1)
        t = Tree(string=s)
        assert SubTreeKernel(deltaMatrix=DynamicDeltaMatrix()).evaluate(t, t) > 0
        assert str(t) == s

    def test_invalid_lambda(self):
        with pytest.raises(ValueError):
            SubTreeKernel(LAMBDA=0.)
        with pytest.raises(ValueError):
            SubTreeKernel(LAMBDA=1.5)


class TestRepresentations:

    def test_examples(self):
        kernel = SubTreeKernel(LAMBDA=1., representation="tree")
        a = Example({"tree": Tree(string="(NP (DT the) (NN cat))"), "words": Sequence(string="the cat")})
        b = Example({"tree": Tree(string="(NP (DT the) (NN cat))")})
        assert kernel.evaluate(a, b) == pytest.approx(8.)

    def test_missing_representation(self):
        kernel = SubTreeKernel(representation="parse")
        a = Example({"tree": Tree(string="(X)")})
        with pytest.raises(RepresentationError):
            kernel.evaluate(a, a)

    def test_wrong_kind_of_representation(self):
        kernel = SubTreeKernel(representation="words")
        a = Example({"words": Sequence(string="the cat")})
        with pytest.raises(ValueError):
            kernel.evaluate(a, a)
