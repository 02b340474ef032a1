"""Compare two texts through a sentence-embedding model."""

__version__ = "0.1.0"
