"""Distance and similarity functions for pine-vector-db.

Inputs may be VectorRecords, 1-D numpy arrays or plain float sequences;
all are read as float32 and accumulated in float64.

Functions
---------
euclidean_distance — L2 norm of the elementwise difference
cosine_similarity  — dot(a, b) / (|a| * |b|), 0.0 when either norm is zero
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .types import VectorRecord

VectorLike = Union[VectorRecord, np.ndarray, Sequence[float]]


def as_array(v: VectorLike) -> np.ndarray:
    """Return ``v`` as a float64 array holding its float32 values."""
    if isinstance(v, VectorRecord):
        v = v.data
    return np.asarray(v, dtype=np.float32).astype(np.float64)


def euclidean_distance(a: VectorLike, b: VectorLike) -> float:
    """L2 (Euclidean) distance between two vectors."""
    return float(np.linalg.norm(as_array(a) - as_array(b)))


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Cosine similarity between two vectors, in [-1, 1].

    Returns exactly 0.0 if either vector has zero norm, so an all-zero
    vector never produces NaN.
    """
    x = as_array(a)
    y = as_array(b)
    denom = float(np.linalg.norm(x)) * float(np.linalg.norm(y))
    if denom == 0.0:
        return 0.0
    return float(np.dot(x, y)) / denom
