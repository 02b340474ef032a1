"""Embedding model runtimes and the handle that owns a loaded model.

A runtime is any callable ``embed(text) -> raw output``. The ``hash`` runtime is
a deterministic placeholder that needs no model download; the ``transformers``
and ``sentence-transformers`` runtimes wrap the real libraries, which are
installed through the matching package extras.
"""
from __future__ import annotations

import asyncio
import enum
import hashlib
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from .errors import ModelInvocationError, ModelLoadError

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "hash"
DEFAULT_MODEL_NAME = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_HASH_DIMENSIONS = 32
HASH_LAYOUTS = ("nested", "tensor", "pooled")

_TOKEN_PATTERN = re.compile(r"\w+|[^\w\s]")

EmbedFn = Callable[[str], Any]


def tokenize(text: str) -> List[str]:
    """Split text into lower-cased word and punctuation tokens."""
    return _TOKEN_PATTERN.findall(text.lower())


def hash_token(token: str, dimensions: int = DEFAULT_HASH_DIMENSIONS) -> List[float]:
    """Map a token to a deterministic vector with values in [-1, 1)."""
    normalized = token.strip().lower().encode("utf-8")
    needed = dimensions * 2
    stream = b""
    block = 0
    while len(stream) < needed:
        stream += hashlib.sha256(block.to_bytes(4, "big") + normalized).digest()
        block += 1
    vector = []
    for i in range(dimensions):
        value = int.from_bytes(stream[i * 2 : i * 2 + 2], "big")
        vector.append((value % 2000) / 1000.0 - 1.0)
    return vector


class HashEmbedder:
    """Placeholder model producing one hashed vector per token.

    ``layout`` picks the shape handed back: ``nested`` mimics a feature-extraction
    pipeline (``[[token vectors]]``), ``tensor`` a flat buffer with
    ``dims=[1, tokens, D]``, and ``pooled`` a sentence-level ``dims=[1, D]``.
    """

    def __init__(self, dimensions: int = DEFAULT_HASH_DIMENSIONS, layout: str = "nested") -> None:
        if dimensions <= 0:
            raise ModelLoadError(f"Hash dimensions must be positive, got {dimensions}")
        if layout not in HASH_LAYOUTS:
            raise ModelLoadError(f"Unknown hash layout '{layout}'. Choose from: {', '.join(HASH_LAYOUTS)}")
        self.dimensions = dimensions
        self.layout = layout

    def __call__(self, text: str) -> Any:
        tokens = [hash_token(token, self.dimensions) for token in tokenize(text)]
        if self.layout == "nested":
            return [tokens]
        if self.layout == "tensor":
            flat = [value for vector in tokens for value in vector]
            return {"data": flat, "dims": [1, len(tokens), self.dimensions]}
        if not tokens:
            return {"data": [], "dims": [0, self.dimensions]}
        pooled = np.mean(np.asarray(tokens), axis=0)
        return {"data": pooled.tolist(), "dims": [1, self.dimensions]}


def _load_hash(model_name: str, options: Mapping[str, Any]) -> EmbedFn:
    dimensions = options.get("dimensions")
    return HashEmbedder(
        dimensions=DEFAULT_HASH_DIMENSIONS if dimensions is None else int(dimensions),
        layout=options.get("layout") or "nested",
    )


def _load_transformers(model_name: str, options: Mapping[str, Any]) -> EmbedFn:
    try:
        from transformers import pipeline
    except ImportError as exc:
        raise ModelLoadError(
            "The transformers backend is unavailable. Install it with `pip install embedding-playground[transformers]`."
        ) from exc
    return pipeline("feature-extraction", model=model_name)


def _load_sentence_transformers(model_name: str, options: Mapping[str, Any]) -> EmbedFn:
    try:
        from sentence_transformers import SentenceTransformer
    except ImportError as exc:
        raise ModelLoadError(
            "The sentence-transformers backend is unavailable. "
            "Install it with `pip install embedding-playground[sentence-transformers]`."
        ) from exc
    model = SentenceTransformer(model_name)

    def _encode(text: str) -> Any:
        # (1, D) array; pooled by the batch branch of the normalizer.
        return model.encode([text])

    return _encode


BACKENDS: Dict[str, Callable[[str, Mapping[str, Any]], EmbedFn]] = {
    "hash": _load_hash,
    "transformers": _load_transformers,
    "sentence-transformers": _load_sentence_transformers,
}


def load_backend(name: str, model_name: str = DEFAULT_MODEL_NAME, **options: Any) -> EmbedFn:
    """Build the runtime registered under ``name``."""
    loader = BACKENDS.get(name)
    if loader is None:
        raise ModelLoadError(f"Unknown backend '{name}'. Choose from: {', '.join(BACKENDS)}")
    return loader(model_name, options)


class ModelState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ModelHandle:
    """Owns one embedding runtime and its lifecycle.

    ``embed`` is only valid once ``load`` has moved the handle to READY. A failed
    load is terminal: the handle never retries.
    """

    def __init__(
        self,
        backend: str = DEFAULT_BACKEND,
        model_name: str = DEFAULT_MODEL_NAME,
        *,
        loader: Callable[..., EmbedFn] = load_backend,
        **options: Any,
    ) -> None:
        self.backend = backend
        self.model_name = model_name
        self.options = options
        self.state = ModelState.UNINITIALIZED
        self.error: Optional[str] = None
        self._loader = loader
        self._embed: Optional[EmbedFn] = None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        backend: str | None = None,
        model_name: str | None = None,
    ) -> "ModelHandle":
        """Build a handle from stored settings, letting explicit arguments win."""
        return cls(
            backend=backend or config.get("backend") or DEFAULT_BACKEND,
            model_name=model_name or config.get("model_name") or DEFAULT_MODEL_NAME,
            dimensions=config.get("hash_dimensions"),
            layout=config.get("hash_layout"),
        )

    @property
    def is_ready(self) -> bool:
        return self.state is ModelState.READY

    @property
    def description(self) -> str:
        if self.backend == "hash":
            return f"hash ({self.options.get('dimensions') or DEFAULT_HASH_DIMENSIONS} dims)"
        return f"{self.backend}: {self.model_name}"

    async def load(self) -> None:
        if self.state is ModelState.READY:
            return
        if self.state is ModelState.FAILED:
            raise ModelLoadError(self.error or "Model load failed")

        self.state = ModelState.LOADING
        logger.info("Loading %s", self.description)
        try:
            self._embed = await asyncio.to_thread(self._loader, self.backend, self.model_name, **self.options)
        except Exception as exc:
            self.state = ModelState.FAILED
            self.error = f"Model load failed: {exc}"
            logger.warning(self.error)
            raise ModelLoadError(self.error) from exc
        self.state = ModelState.READY
        logger.info("Model ready: %s", self.description)

    async def embed(self, text: str) -> Any:
        if self.state is not ModelState.READY or self._embed is None:
            raise ModelLoadError(f"Model is not ready (state: {self.state.value})")
        logger.debug("Embedding text of %d characters", len(text))
        try:
            return await asyncio.to_thread(self._embed, text)
        except Exception as exc:
            raise ModelInvocationError(str(exc) or type(exc).__name__) from exc


__all__ = [
    "DEFAULT_BACKEND",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_HASH_DIMENSIONS",
    "HASH_LAYOUTS",
    "BACKENDS",
    "HashEmbedder",
    "ModelHandle",
    "ModelState",
    "hash_token",
    "load_backend",
    "tokenize",
]
