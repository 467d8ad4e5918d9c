from kerCONV.deltamatrix import DeltaMatrix, DynamicDeltaMatrix, StaticDeltaMatrix
from kerCONV.example import Example
from kerCONV.exceptions import CapacityError, KernelError, RepresentationError
from kerCONV.normalization import NormalizationKernel, kernel_matrix
from kerCONV.partialtreekernel import PartialTreeKernel
from kerCONV.sequence import LexicalElement, Sequence, SequenceElement
from kerCONV.sequencekernel import SequenceKernel
from kerCONV.tree import Tree
from kerCONV.treekernel import SubTreeKernel

__version__ = "0.1.0"
