from stanfordcorenlp import StanfordCoreNLP

from kerCONV.deltamatrix import DynamicDeltaMatrix
from kerCONV.normalization import NormalizationKernel
from kerCONV.tree_encode import parse_tree
from kerCONV.treekernel import SubTreeKernel


def getSTK(kernel, nlp, s1, s2):
    t1 = parse_tree(s1, nlp=nlp, annotator='depparse', tokens_as_leaves=False)
    t2 = parse_tree(s2, nlp=nlp, annotator='depparse', tokens_as_leaves=False)
    print(t1)
    print(t2)

    k = kernel.evaluate(t1, t2)
    print(k)
    return k


LAMBDA = 0.4

nlp = StanfordCoreNLP('/stanford-corenlp-full-2018-10-05')
kernel = NormalizationKernel(SubTreeKernel(LAMBDA=LAMBDA, deltaMatrix=DynamicDeltaMatrix()))

s1 = "How do you know? All this is their information again."
s2 = "How do they know? This is all my information."
k = getSTK(kernel, nlp, s1, s2)
