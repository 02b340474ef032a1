"""Core utilities for embedding-playground."""

from .errors import (
    ComparisonError,
    DimensionMismatch,
    EmbeddingError,
    EmptyTokenMatrix,
    InvalidComparisonRequest,
    ModelInvocationError,
    ModelLoadError,
    UndefinedSimilarity,
    UnsupportedOutputFormat,
)
from .normalize import NestedOutput, NormalizedEmbedding, TensorOutput, coerce_raw_output, normalize
from .similarity import classify_similarity, cosine_similarity
from .runtime import BACKENDS, HashEmbedder, ModelHandle, ModelState, load_backend
from .config import ConfigManager, load_config, update_config
from .output import (
    configure_logging,
    console,
    display_comparison,
    print_error,
    print_success,
    print_warning,
    render_embedding_panel,
    render_status_panel,
)

__all__ = [
    "ComparisonError",
    "DimensionMismatch",
    "EmbeddingError",
    "EmptyTokenMatrix",
    "InvalidComparisonRequest",
    "ModelInvocationError",
    "ModelLoadError",
    "UndefinedSimilarity",
    "UnsupportedOutputFormat",
    "NestedOutput",
    "NormalizedEmbedding",
    "TensorOutput",
    "coerce_raw_output",
    "normalize",
    "classify_similarity",
    "cosine_similarity",
    "BACKENDS",
    "HashEmbedder",
    "ModelHandle",
    "ModelState",
    "load_backend",
    "ConfigManager",
    "load_config",
    "update_config",
    "configure_logging",
    "console",
    "display_comparison",
    "print_error",
    "print_success",
    "print_warning",
    "render_embedding_panel",
    "render_status_panel",
]
