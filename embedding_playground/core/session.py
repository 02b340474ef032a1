"""Orchestrates one model and the comparison requests issued against it."""
from __future__ import annotations

import asyncio
import enum
import logging
from typing import Optional

from ..models.comparison import ComparisonResult
from .errors import (
    ComparisonError,
    DimensionMismatch,
    EmbeddingError,
    InvalidComparisonRequest,
    ModelLoadError,
    UndefinedSimilarity,
)
from .normalize import normalize
from .runtime import ModelHandle
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    MODEL_LOADING = "model_loading"
    READY = "ready"
    COMPARING = "comparing"
    RESULT = "result"
    FAILED = "failed"


class ComparisonSession:
    """Run comparison requests against a model handle.

    Errors raised while embedding, normalizing or scoring abandon the request and
    leave the session in FAILED; the next request starts from a clean slate. Only
    a failed model load is fatal. Overlapping requests are serialized.
    """

    def __init__(self, handle: ModelHandle) -> None:
        self.handle = handle
        self.state = SessionState.IDLE
        self.result: Optional[ComparisonResult] = None
        self.error: Optional[str] = None
        self.fatal = False
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self.handle.is_ready:
            self.state = SessionState.READY
            return
        self.state = SessionState.MODEL_LOADING
        try:
            await self.handle.load()
        except ModelLoadError as exc:
            self.state = SessionState.FAILED
            self.fatal = True
            self.error = str(exc)
            raise
        self.state = SessionState.READY

    async def compare(self, user_text: str, expected_text: str) -> ComparisonResult:
        if not user_text.strip() or not expected_text.strip():
            raise InvalidComparisonRequest("Both texts are required.")
        if self.fatal:
            raise ModelLoadError(self.error or "Model is unavailable")
        async with self._lock:
            if self.state is SessionState.IDLE:
                await self.start()
            return await self._run(user_text, expected_text)

    async def _run(self, user_text: str, expected_text: str) -> ComparisonResult:
        self.result = None
        self.error = None
        self.state = SessionState.COMPARING
        try:
            user_raw, expected_raw = await asyncio.gather(
                self.handle.embed(user_text), self.handle.embed(expected_text)
            )
            user = normalize(user_raw)
            expected = normalize(expected_raw)
            similarity = cosine_similarity(user.vector, expected.vector)
        except UndefinedSimilarity as exc:
            raise self._fail(f"Similarity is undefined: {exc}", exc) from exc
        except (EmbeddingError, DimensionMismatch) as exc:
            raise self._fail(f"Error generating embeddings: {exc}", exc) from exc

        self.result = ComparisonResult(
            user_text=user_text,
            expected_text=expected_text,
            user=user,
            expected=expected,
            similarity=similarity,
        )
        self.state = SessionState.RESULT
        logger.info("Comparison finished: %s", self.result.summary)
        return self.result

    def _fail(self, message: str, cause: BaseException) -> ComparisonError:
        self.state = SessionState.FAILED
        self.error = message
        logger.warning(message)
        return ComparisonError(message, cause)


__all__ = ["ComparisonSession", "SessionState"]
