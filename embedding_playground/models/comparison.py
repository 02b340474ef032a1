"""Dataclass describing the outcome of one comparison request."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ..core.normalize import NormalizedEmbedding


@dataclass
class ComparisonResult:
    user_text: str
    expected_text: str
    user: NormalizedEmbedding
    expected: NormalizedEmbedding
    similarity: float

    @property
    def user_vector(self) -> List[float]:
        return self.user.as_list()

    @property
    def expected_vector(self) -> List[float]:
        return self.expected.as_list()

    @property
    def dimension(self) -> int:
        return self.user.dimension

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": {
                "text": self.user_text,
                "token_count": self.user.token_count,
                "vector": self.user_vector,
            },
            "expected": {
                "text": self.expected_text,
                "token_count": self.expected.token_count,
                "vector": self.expected_vector,
            },
            "dimension": self.dimension,
            "similarity": self.similarity,
        }

    @property
    def summary(self) -> str:
        return (
            f"similarity {self.similarity:.4f} "
            f"({self.user.token_count} vs {self.expected.token_count} tokens, {self.dimension} dims)"
        )
