"""
Failure taxonomy shared by retrieval, generation and persistence.
Every failure carries the stage that produced it so callers can tell errors apart from content.
"""

from typing import Any, Dict, Optional


class RagWriterError(Exception):
    """Base class for all structured failures raised by ragwriter."""

    kind = "ragwriter_error"

    def __init__(self, detail: str, stage: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.stage = stage

    def to_dict(self) -> Dict[str, Any]:
        """Structured view used by the API and CLI."""
        return {
            "kind": self.kind,
            "stage": self.stage,
            "detail": self.detail
        }

    def __str__(self) -> str:
        if self.stage:
            return f"{self.kind} at stage '{self.stage}': {self.detail}"
        return f"{self.kind}: {self.detail}"


class EmbeddingFailure(RagWriterError):
    """Text could not be turned into an embedding vector."""

    kind = "embedding_failure"


class GenerationFailure(RagWriterError):
    """Chat model call failed or returned an empty result."""

    kind = "generation_failure"


class PersistenceFailure(RagWriterError):
    """Chat history store unavailable or write rejected."""

    kind = "persistence_failure"


class DimensionMismatchError(RagWriterError, ValueError):
    """Two embeddings with different dimensionality were compared."""

    kind = "dimension_mismatch"

    def __init__(self, expected: int, actual: int, stage: Optional[str] = "similarity"):
        super().__init__(f"Vector dimension {actual} does not match expected dimension {expected}", stage)
        self.expected = expected
        self.actual = actual


class EmbeddingCodecError(RagWriterError, ValueError):
    """Serialized embedding text does not follow the [n1,n2,...] grammar."""

    kind = "embedding_codec_error"
