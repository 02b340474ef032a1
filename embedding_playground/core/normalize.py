"""Reduce raw model output to one pooled embedding vector per input text.

Runtimes disagree on how they hand back feature-extraction results. Some return
nested lists (``[batch][tokens][dim]``, or ``[batch][dim]`` when the model has
already pooled), others a flat row-major buffer together with its shape. Every
output is first coerced into one of two variants and then reduced with a mean
pool over the token (or batch) axis.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

import numpy as np

from .errors import EmptyTokenMatrix, UnsupportedOutputFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NestedOutput:
    """Nested arrays. Only the first batch item is pooled."""

    batch: Sequence[Any]


@dataclass(frozen=True)
class TensorOutput:
    """Flat row-major buffer plus the shape it encodes."""

    data: Sequence[float]
    dims: Tuple[int, ...]


RawModelOutput = Union[NestedOutput, TensorOutput]


@dataclass(frozen=True, eq=False)
class NormalizedEmbedding:
    """Pooled vector for one input text and the number of rows averaged into it."""

    vector: np.ndarray
    token_count: int

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])

    def as_list(self) -> List[float]:
        return [float(value) for value in self.vector]


def coerce_raw_output(value: Any) -> RawModelOutput:
    """Classify whatever a runtime returned into one of the recognised variants."""
    if isinstance(value, (NestedOutput, TensorOutput)):
        return value
    if isinstance(value, np.ndarray):
        return TensorOutput(data=value.ravel(), dims=tuple(int(d) for d in value.shape))
    if isinstance(value, Mapping):
        if "data" in value and "dims" in value:
            return TensorOutput(data=value["data"], dims=_as_dims(value["dims"]))
        raise UnsupportedOutputFormat("mapping without 'data' and 'dims'")
    if isinstance(value, (list, tuple)):
        return NestedOutput(batch=value)
    if hasattr(value, "data") and hasattr(value, "dims"):
        return TensorOutput(data=value.data, dims=_as_dims(value.dims))
    raise UnsupportedOutputFormat(f"got {type(value).__name__}")


def normalize(raw: Any) -> NormalizedEmbedding:
    """Return the mean-pooled vector and token count for a raw model output."""
    output = coerce_raw_output(raw)
    if isinstance(output, NestedOutput):
        return _normalize_nested(output)
    if isinstance(output, TensorOutput):
        return _normalize_tensor(output)
    raise UnsupportedOutputFormat(f"got {type(output).__name__}")


def mean_pool(vectors: Any) -> np.ndarray:
    """Element-wise mean over the first axis of an ``N x D`` matrix."""
    matrix = _as_float_array(vectors)
    if matrix.ndim != 2:
        raise UnsupportedOutputFormat(f"expected a token matrix, got {matrix.ndim} dimensions")
    if matrix.shape[0] == 0:
        raise EmptyTokenMatrix("Cannot pool an empty token set")
    if matrix.shape[1] == 0:
        raise UnsupportedOutputFormat("token vectors have zero width")
    return matrix.mean(axis=0)


def _normalize_nested(output: NestedOutput) -> NormalizedEmbedding:
    if len(output.batch) == 0:
        raise UnsupportedOutputFormat("empty batch")
    batch_item = output.batch[0]
    if not isinstance(batch_item, (list, tuple, np.ndarray)):
        raise UnsupportedOutputFormat("batch item is not a sequence")
    if len(batch_item) == 0:
        raise EmptyTokenMatrix("Model returned no token vectors")

    matrix = _as_float_array(batch_item)
    if matrix.ndim == 2:
        logger.debug("Pooling %d nested token vectors of dimension %d", matrix.shape[0], matrix.shape[1])
        return NormalizedEmbedding(vector=mean_pool(matrix), token_count=matrix.shape[0])
    if matrix.ndim == 1:
        # Sentence-level output, already pooled by the model.
        logger.debug("Using pooled nested vector of dimension %d", matrix.shape[0])
        return NormalizedEmbedding(vector=matrix, token_count=1)
    raise UnsupportedOutputFormat(f"batch item has {matrix.ndim} dimensions")


def _normalize_tensor(output: TensorOutput) -> NormalizedEmbedding:
    dims = output.dims
    if len(dims) not in (2, 3):
        raise UnsupportedOutputFormat(f"expected 2 or 3 dims, got {len(dims)}")

    data = _as_float_array(output.data).ravel()
    dim = dims[-1]
    if dim == 0:
        raise UnsupportedOutputFormat("embedding dimension is zero")

    if len(dims) == 3:
        batch, seq_len, _ = dims
        if batch == 0 or seq_len == 0:
            raise EmptyTokenMatrix("Model returned no token vectors")
        _check_buffer(data, dims)
        if batch > 1:
            logger.debug("Ignoring %d extra batch items in tensor output", batch - 1)
        tokens = data[: seq_len * dim].reshape(seq_len, dim)
        logger.debug("Pooling %d tensor token vectors of dimension %d", seq_len, dim)
        return NormalizedEmbedding(vector=mean_pool(tokens), token_count=seq_len)

    batch, _ = dims
    if batch == 0:
        raise EmptyTokenMatrix("Model returned an empty batch")
    _check_buffer(data, dims)
    # A reshape over the flat buffer is a view; rows are never copied out.
    rows = data.reshape(batch, dim)
    logger.debug("Pooling %d batch rows of dimension %d", batch, dim)
    return NormalizedEmbedding(vector=rows.sum(axis=0) / batch, token_count=batch)


def _check_buffer(data: np.ndarray, dims: Tuple[int, ...]) -> None:
    expected = int(np.prod(dims))
    if data.size != expected:
        raise UnsupportedOutputFormat(
            f"buffer holds {data.size} values but dims {list(dims)} describe {expected}"
        )


def _as_dims(value: Any) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)):
        raise UnsupportedOutputFormat("dims is not an array")
    dims = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (int, np.integer)) or item < 0:
            raise UnsupportedOutputFormat(f"invalid dimension {item!r}")
        dims.append(int(item))
    return tuple(dims)


def _as_float_array(values: Any) -> np.ndarray:
    if isinstance(values, (str, bytes)):
        raise UnsupportedOutputFormat("buffer is text, not numbers")
    try:
        array = np.array(values)
    except (TypeError, ValueError) as exc:
        raise UnsupportedOutputFormat("non-numeric or ragged values") from exc
    if not (
        np.issubdtype(array.dtype, np.integer)
        or np.issubdtype(array.dtype, np.floating)
        or np.issubdtype(array.dtype, np.bool_)
    ):
        raise UnsupportedOutputFormat("non-numeric or ragged values")
    array = array.astype(np.float64)
    if not np.all(np.isfinite(array)):
        raise UnsupportedOutputFormat("non-finite values")
    return array


__all__ = [
    "NestedOutput",
    "TensorOutput",
    "RawModelOutput",
    "NormalizedEmbedding",
    "coerce_raw_output",
    "normalize",
    "mean_pool",
]
