"""Cosine similarity between two pooled embeddings."""
from __future__ import annotations

import logging
from typing import Any

import numpy as np

from .errors import DimensionMismatch, UndefinedSimilarity

logger = logging.getLogger(__name__)

GOOD_THRESHOLD = 0.85
OK_THRESHOLD = 0.5

BAND_GOOD = "good"
BAND_OK = "ok"
BAND_BAD = "bad"


def cosine_similarity(a: Any, b: Any) -> float:
    """Return ``dot(a, b) / (|a| * |b|)`` for two vectors of equal length.

    Raises ``DimensionMismatch`` for empty or differently sized vectors and
    ``UndefinedSimilarity`` when either vector has zero norm.
    """
    left = _as_vector(a)
    right = _as_vector(b)
    if left.shape != right.shape:
        raise DimensionMismatch(
            f"Cannot compare vectors of dimension {left.shape[0]} and {right.shape[0]}"
        )

    left_scale = np.max(np.abs(left))
    right_scale = np.max(np.abs(right))
    if left_scale == 0 or right_scale == 0:
        raise UndefinedSimilarity("cannot compare a vector with zero magnitude")

    # Cosine is scale-invariant; rescaling keeps the dot product and norms
    # clear of overflow and underflow.
    left = left / left_scale
    right = right / right_scale
    score = float(np.dot(left, right) / (np.linalg.norm(left) * np.linalg.norm(right)))
    if not np.isfinite(score):
        raise UndefinedSimilarity("similarity is not a finite number")
    logger.debug("Cosine similarity over %d dimensions: %.6f", left.shape[0], score)
    return float(np.clip(score, -1.0, 1.0))


def classify_similarity(
    score: float, good: float = GOOD_THRESHOLD, ok: float = OK_THRESHOLD
) -> str:
    """Bucket a score into the good / ok / bad bands shown next to results."""
    if ok > good:
        raise ValueError(f"ok threshold {ok} is above good threshold {good}")
    if score >= good:
        return BAND_GOOD
    if score >= ok:
        return BAND_OK
    return BAND_BAD


def _as_vector(value: Any) -> np.ndarray:
    vector = np.asarray(value, dtype=np.float64)
    if vector.ndim != 1 or vector.shape[0] == 0:
        raise DimensionMismatch(f"Expected a non-empty 1-D vector, got shape {vector.shape}")
    return vector


__all__ = [
    "GOOD_THRESHOLD",
    "OK_THRESHOLD",
    "BAND_GOOD",
    "BAND_OK",
    "BAND_BAD",
    "cosine_similarity",
    "classify_similarity",
]
