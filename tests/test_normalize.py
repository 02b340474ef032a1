from __future__ import annotations

import random
from types import SimpleNamespace

import numpy as np
import pytest

from embedding_playground.core.errors import EmptyTokenMatrix, UnsupportedOutputFormat
from embedding_playground.core.normalize import (
    NestedOutput,
    TensorOutput,
    coerce_raw_output,
    mean_pool,
    normalize,
)


def test_tensor_with_three_dims_pools_tokens() -> None:
    embedding = normalize({"dims": [1, 2, 4], "data": [1, 2, 3, 4, 5, 6, 7, 8]})

    assert embedding.as_list() == [3.0, 4.0, 5.0, 6.0]
    assert embedding.token_count == 2
    assert embedding.dimension == 4


def test_tensor_with_two_dims_pools_batch_rows() -> None:
    embedding = normalize({"dims": [2, 3], "data": [1, 1, 1, 3, 3, 3]})

    assert embedding.as_list() == [2.0, 2.0, 2.0]
    assert embedding.token_count == 2


def test_nested_token_matrix_is_mean_pooled() -> None:
    embedding = normalize([[[1, 0], [0, 1]]])

    assert embedding.as_list() == [0.5, 0.5]
    assert embedding.token_count == 2


def test_nested_flat_vector_is_used_directly() -> None:
    embedding = normalize([[0.25, -0.5, 1.0]])

    assert embedding.as_list() == [0.25, -0.5, 1.0]
    assert embedding.token_count == 1


def test_nested_and_tensor_shapes_agree() -> None:
    rng = random.Random(7)
    tokens = [[rng.uniform(-1, 1) for _ in range(6)] for _ in range(5)]
    flat = [value for token in tokens for value in token]

    nested = normalize([tokens])
    tensor = normalize({"data": flat, "dims": [1, 5, 6]})

    np.testing.assert_allclose(nested.vector, tensor.vector)
    assert nested.token_count == tensor.token_count == 5


def test_pooling_ignores_token_order() -> None:
    rng = random.Random(11)
    tokens = [[rng.uniform(-1, 1) for _ in range(4)] for _ in range(8)]
    shuffled = list(tokens)
    rng.shuffle(shuffled)

    np.testing.assert_allclose(normalize([tokens]).vector, normalize([shuffled]).vector)


def test_numpy_arrays_are_read_as_tensors() -> None:
    output = np.array([[0.5, 1.5, -1.0]])

    raw = coerce_raw_output(output)
    embedding = normalize(output)

    assert isinstance(raw, TensorOutput)
    assert raw.dims == (1, 3)
    assert embedding.as_list() == [0.5, 1.5, -1.0]
    assert embedding.token_count == 1


def test_tensor_like_objects_are_accepted() -> None:
    output = SimpleNamespace(data=[2, 4, 6, 8], dims=[1, 2, 2])

    embedding = normalize(output)

    assert embedding.as_list() == [4.0, 6.0]
    assert embedding.token_count == 2


def test_only_first_batch_item_of_three_dim_tensor_is_pooled() -> None:
    embedding = normalize({"dims": [2, 1, 2], "data": [1, 3, 100, 100]})

    assert embedding.as_list() == [1.0, 3.0]
    assert embedding.token_count == 1


def test_lists_are_coerced_to_nested_output() -> None:
    assert isinstance(coerce_raw_output([[1.0, 2.0]]), NestedOutput)


def test_normalize_does_not_mutate_input() -> None:
    data = np.array([1.0, 2.0, 3.0, 4.0])
    normalize({"data": data, "dims": [1, 4]})
    assert data.tolist() == [1.0, 2.0, 3.0, 4.0]


@pytest.mark.parametrize(
    "raw",
    [
        {"dims": [1, 1, 2, 2], "data": [1, 2, 3, 4]},
        {"dims": [4], "data": [1, 2, 3, 4]},
        {"data": [1, 2, 3]},
        {"dims": "1,3", "data": [1, 2, 3]},
        None,
        "not an output",
        42,
        [],
        [1.0, 2.0],
        [[[1, 2], [3]]],
        [[["a", "b"]]],
        [[1.0, None]],
        {"dims": [1, 2, 2], "data": [1, 2, 3]},
        {"dims": [1, 0], "data": []},
        {"dims": [1, 1], "data": "12"},
        [["1", "2"]],
    ],
)
def test_unsupported_shapes_raise(raw) -> None:
    with pytest.raises(UnsupportedOutputFormat) as excinfo:
        normalize(raw)
    assert str(excinfo.value).startswith("Unsupported pipeline output format")


@pytest.mark.parametrize(
    "raw",
    [
        [[]],
        {"dims": [1, 0, 4], "data": []},
        {"dims": [0, 3], "data": []},
    ],
)
def test_empty_token_sets_raise(raw) -> None:
    with pytest.raises(EmptyTokenMatrix):
        normalize(raw)


def test_mean_pool_rejects_empty_matrix() -> None:
    with pytest.raises(EmptyTokenMatrix):
        mean_pool(np.zeros((0, 3)))
