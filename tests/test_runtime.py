from __future__ import annotations

import asyncio

import numpy as np
import pytest

from embedding_playground.core.errors import EmptyTokenMatrix, ModelInvocationError, ModelLoadError
from embedding_playground.core.normalize import normalize
from embedding_playground.core.runtime import (
    HashEmbedder,
    ModelHandle,
    ModelState,
    hash_token,
    load_backend,
    tokenize,
)


def test_tokenize_splits_words_and_punctuation() -> None:
    assert tokenize("Hello, World!") == ["hello", ",", "world", "!"]


def test_hash_token_is_deterministic_and_bounded() -> None:
    first = hash_token("cat", 48)
    assert first == hash_token("cat", 48)
    assert first != hash_token("dog", 48)
    assert len(first) == 48
    assert all(-1.0 <= value < 1.0 for value in first)


def test_hash_layouts_normalize_to_the_same_vector() -> None:
    text = "The cat sits on the mat."
    nested = normalize(HashEmbedder(16, "nested")(text))
    tensor = normalize(HashEmbedder(16, "tensor")(text))
    pooled = normalize(HashEmbedder(16, "pooled")(text))

    np.testing.assert_allclose(nested.vector, tensor.vector)
    np.testing.assert_allclose(nested.vector, pooled.vector)
    assert nested.token_count == tensor.token_count == len(tokenize(text))
    assert pooled.token_count == 1


@pytest.mark.parametrize("layout", ["nested", "tensor", "pooled"])
def test_hash_output_without_tokens_is_rejected(layout: str) -> None:
    with pytest.raises(EmptyTokenMatrix):
        normalize(HashEmbedder(8, layout)("   "))


def test_hash_embedder_validates_settings() -> None:
    with pytest.raises(ModelLoadError):
        HashEmbedder(0)
    with pytest.raises(ModelLoadError):
        HashEmbedder(8, "sparse")


def test_load_backend_rejects_unknown_names() -> None:
    with pytest.raises(ModelLoadError, match="Unknown backend"):
        load_backend("word2vec")


def test_handle_loads_and_embeds() -> None:
    handle = ModelHandle("hash", dimensions=8, layout="tensor")

    async def scenario():
        await handle.load()
        return await handle.embed("hello world")

    output = asyncio.run(scenario())

    assert handle.state is ModelState.READY
    assert output["dims"] == [1, 2, 8]


def test_handle_requires_load_before_embed() -> None:
    handle = ModelHandle("hash")
    with pytest.raises(ModelLoadError, match="not ready"):
        asyncio.run(handle.embed("hello"))


def test_failed_load_is_terminal() -> None:
    calls = []

    def broken_loader(backend, model_name, **options):
        calls.append(backend)
        raise OSError("weights not found")

    handle = ModelHandle("transformers", "missing/model", loader=broken_loader)

    with pytest.raises(ModelLoadError, match="Model load failed: weights not found"):
        asyncio.run(handle.load())
    with pytest.raises(ModelLoadError):
        asyncio.run(handle.load())

    assert handle.state is ModelState.FAILED
    assert calls == ["transformers"]


def test_runtime_errors_become_invocation_errors() -> None:
    def loader(backend, model_name, **options):
        def embed(text):
            raise RuntimeError("runtime exploded")

        return embed

    handle = ModelHandle(loader=loader)

    async def scenario():
        await handle.load()
        await handle.embed("hello")

    with pytest.raises(ModelInvocationError, match="runtime exploded"):
        asyncio.run(scenario())


def test_from_config_prefers_explicit_arguments() -> None:
    config = {"backend": "hash", "model_name": "stored/model", "hash_dimensions": 12, "hash_layout": "pooled"}

    handle = ModelHandle.from_config(config, model_name="explicit/model")

    assert handle.backend == "hash"
    assert handle.model_name == "explicit/model"
    assert handle.options == {"dimensions": 12, "layout": "pooled"}
