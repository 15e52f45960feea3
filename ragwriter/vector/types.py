"""
Record types for the chat history and similarity search.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence


Embedding = Sequence[float]


@dataclass(frozen=True)
class InteractionRecord:
    """A stored question/answer pair with the embedding of its question."""

    prompt: str
    """The user's question"""

    response: str
    """The model's answer"""

    embedding: Optional[List[float]] = None
    """Embedding of the prompt; None when it was never computed"""

    id: Optional[int] = None
    """Identifier assigned by the store on append"""

    def with_id(self, record_id: int) -> "InteractionRecord":
        """Copy of this record carrying the store-assigned id."""
        return replace(self, id=record_id)

    @property
    def dimension(self) -> Optional[int]:
        return len(self.embedding) if self.embedding is not None else None


@dataclass(frozen=True)
class ScoredRecord:
    """A record paired with its similarity to a query."""

    record: InteractionRecord
    """The candidate record"""

    score: float
    """Cosine similarity with the query; -inf when undefined"""
