# tests/utils.py
"""
Small, reusable helpers used across the X-means test suite.

Functions:
- as_numpy(x): tensor/array/list to numpy.
- partition_of(labels): labels as a set of frozensets of point indices.
- labels_equal_up_to_perm(y1, y2): same partition under some relabelling.
- perm_invariant_accuracy(y_pred, split_index): best accuracy over label swap for 2-way splits.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Set

import numpy as np
import torch


def as_numpy(x: Any) -> np.ndarray:
    """Convert a tensor, array or list to a numpy array."""
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def partition_of(labels: Any) -> Set[FrozenSet[int]]:
    """
    The partition induced by a label vector, ignoring label names.

    Example: [1, 1, 0] -> {frozenset({0, 1}), frozenset({2})}
    """
    y = as_numpy(labels)
    groups: Dict[int, Set[int]] = {}
    for idx, label in enumerate(y.tolist()):
        groups.setdefault(label, set()).add(idx)
    return {frozenset(g) for g in groups.values()}


def labels_equal_up_to_perm(y1: Any, y2: Any) -> bool:
    """True if y2 is y1 with the label names permuted."""
    return partition_of(y1) == partition_of(y2)


def perm_invariant_accuracy(y_pred: Any, split_index: int) -> float:
    """
    Best accuracy over label swaps for 2-way datasets where the first
    `split_index` points belong to class 0 and the rest to class 1.
    """
    y_pred = as_numpy(y_pred)
    if y_pred.ndim != 1:
        raise ValueError(f"y_pred must be 1D, got shape {y_pred.shape}")
    n = y_pred.size
    if not (0 <= split_index <= n):
        raise ValueError(f"split_index must be in [0, {n}], got {split_index}")

    first = y_pred[:split_index]
    second = y_pred[split_index:]

    acc_a = (np.sum(first == 0) + np.sum(second == 1)) / max(1, n)
    acc_b = (np.sum(first == 1) + np.sum(second == 0)) / max(1, n)

    return float(max(acc_a, acc_b))


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Output
    ------
    [timing] fit {"n":400,"d":2,"max_k":8} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = ""
    if meta:
        try:
            meta_str = " " + json.dumps(meta, separators=(",", ":"))
        except TypeError:
            meta_str = " " + repr(meta)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
