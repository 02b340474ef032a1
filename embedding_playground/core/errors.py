"""Exception hierarchy shared by the runtime, normalizer, scorer and session."""
from __future__ import annotations


class EmbeddingError(RuntimeError):
    """Base class for failures raised while producing or comparing embeddings."""


class ModelLoadError(EmbeddingError):
    """The embedding model could not be initialised. Fatal for the session."""


class ModelInvocationError(EmbeddingError):
    """A single embed call failed."""


class UnsupportedOutputFormat(EmbeddingError):
    """The model output matched none of the recognised shapes."""

    def __init__(self, detail: str | None = None) -> None:
        message = "Unsupported pipeline output format"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class EmptyTokenMatrix(EmbeddingError):
    """Pooling was asked to average zero vectors."""


class UndefinedSimilarity(EmbeddingError):
    """Cosine similarity is undefined because a vector has zero norm."""


class ComparisonError(EmbeddingError):
    """A comparison request was abandoned; ``message`` is safe to show users."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class DimensionMismatch(ValueError):
    """Two embedding vectors do not share the same positive dimension."""


class InvalidComparisonRequest(ValueError):
    """A comparison was requested without two non-empty texts."""
