"""Kernels built from configuration dictionaries or JSON files.

A configuration looks like::

    {"kernelType": "stk",
     "decayFactor": 0.4,
     "representationIdentifier": "tree",
     "cacheBackend": {"type": "static", "capacity": 400}}

``kernelType`` is one of ``stk``, ``ptk``, ``seqk`` or ``norm``; the last one wraps
the kernel described under ``baseKernel``. Missing keys take the kernels' defaults.
"""
import json

from kerCONV.deltamatrix import DynamicDeltaMatrix, StaticDeltaMatrix
from kerCONV.normalization import NormalizationKernel
from kerCONV.partialtreekernel import PartialTreeKernel
from kerCONV.sequencekernel import SequenceKernel
from kerCONV.treekernel import SubTreeKernel


def delta_matrix_from_config(config):
    if config is None:
        return None
    if isinstance(config, str):
        config = {"type": config}
    backend = config.get("type")
    if backend == "static":
        return StaticDeltaMatrix(config.get("capacity", StaticDeltaMatrix.DEFAULT_SIZE))
    if backend == "dynamic":
        return DynamicDeltaMatrix()
    raise ValueError(f"unknown cache backend {backend!r}, expected 'static' or 'dynamic'")


def kernel_from_config(config):
    kernel_type = config.get("kernelType")
    representation = config.get("representationIdentifier", "0")

    if kernel_type == "stk":
        return SubTreeKernel(LAMBDA=config.get("decayFactor", 0.4),
                             representation=representation,
                             deltaMatrix=delta_matrix_from_config(config.get("cacheBackend")))
    if kernel_type == "ptk":
        return PartialTreeKernel(LAMBDA=config.get("decayFactor", 0.4),
                                 MU=config.get("mu", 0.4),
                                 representation=representation,
                                 deltaMatrix=delta_matrix_from_config(config.get("cacheBackend")))
    if kernel_type == "seqk":
        return SequenceKernel(maxSubseqLength=config.get("maxSubsequenceLength", 4),
                              LAMBDA=config.get("decayFactor", 0.75),
                              representation=representation,
                              typed=config.get("typed", True))
    if kernel_type == "norm":
        if "baseKernel" not in config:
            raise ValueError("a 'norm' kernel needs a 'baseKernel'")
        return NormalizationKernel(kernel_from_config(config["baseKernel"]))
    raise ValueError(f"unknown kernelType {kernel_type!r}")


def load_kernel(path):
    with open(path, "r") as fd:
        return kernel_from_config(json.load(fd))


def save_kernel(kernel, path):
    with open(path, "w") as fd:
        json.dump(kernel.toConfig(), fd, indent=2)
