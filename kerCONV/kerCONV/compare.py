"""Pairwise comparison of the structures listed in a CSV file.

The input has two columns, ``s1`` and ``s2``, holding trees in parenthetic form (tree
kernels) or whitespace-separated tokens (sequence kernels). Every row gets its raw
and normalized kernel value::

    kerconv-compare pairs.csv --kernel-config stk.json --output scores.csv
"""
import argparse
import logging

import numpy as np
import pandas as pd

from kerCONV.config import load_kernel
from kerCONV.normalization import NormalizationKernel
from kerCONV.sequence import Sequence
from kerCONV.tree import Tree
from kerCONV.treekernel import SubTreeKernel

logger = logging.getLogger(__name__)


def read_structure(kernel, s):
    if issubclass(kernel.representationType, Sequence):
        return Sequence(string=s)
    return Tree(string=s)


def compare_pairs(input_file, kernel=None, output_path=None):
    """
    :param input_file: path (or buffer) of the CSV with the ``s1`` and ``s2`` columns
    :param kernel: the kernel to evaluate, a default :class:`SubTreeKernel` if None; a
        :class:`NormalizationKernel` is replaced by the kernel it normalizes
    :param output_path: where to write the results as CSV, if given
    :return: a DataFrame with columns ``s1, s2, kernel, normalized, LAMBDA``
    """
    if kernel is None:
        kernel = SubTreeKernel()
    if isinstance(kernel, NormalizationKernel):
        kernel = kernel.base
    normalized = NormalizationKernel(kernel)
    pairs = pd.read_csv(input_file)
    missing = {"s1", "s2"} - set(pairs.columns)
    if missing:
        raise ValueError(f"missing columns in {input_file}: {sorted(missing)}")

    records = []
    for s1, s2 in zip(pairs["s1"], pairs["s2"]):
        a, b = read_structure(kernel, s1), read_structure(kernel, s2)
        records.append({
            "s1": s1,
            "s2": s2,
            "kernel": kernel.evaluate(a, b),
            "normalized": normalized.evaluate(a, b),
        })
    logger.info("compared %d pairs", len(records))

    df = pd.DataFrame(records, columns=["s1", "s2", "kernel", "normalized"])
    df["LAMBDA"] = getattr(kernel, "LAMBDA", np.nan)
    if output_path is not None:
        df.to_csv(output_path, index=False)
    return df


def main(argv=None):
    parser = argparse.ArgumentParser(description="Kernel values between the pairs of structures of a CSV file")
    parser.add_argument("input", help="CSV file with columns s1 and s2")
    parser.add_argument("--kernel-config", help="JSON kernel configuration (default: SubTree Kernel, lambda 0.4)")
    parser.add_argument("--output", help="CSV file for the results (default: print them)")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    kernel = load_kernel(args.kernel_config) if args.kernel_config else SubTreeKernel()
    df = compare_pairs(args.input, kernel, args.output)
    if args.output is None:
        print(df.to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
