"""
Brute-force cosine similarity ranking over stored interactions.
Every query scans all candidates; there is no index.
"""

from typing import Iterable, List, Sequence

import numpy as np

from ..core.errors import DimensionMismatchError
from .types import InteractionRecord, ScoredRecord

# Score given to candidates whose similarity is undefined (zero-norm vectors)
UNDEFINED_SCORE = float("-inf")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors, or UNDEFINED_SCORE if either has zero norm."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(expected=vb.shape[0], actual=va.shape[0])

    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0 or not np.isfinite(norm):
        return UNDEFINED_SCORE

    score = float(np.dot(va, vb) / norm)
    if np.isnan(score):
        return UNDEFINED_SCORE
    return score


def score_candidates(query: Sequence[float], candidates: Iterable[InteractionRecord]) -> List[ScoredRecord]:
    """Score every candidate that has an embedding, keeping scan order."""
    query_vector = np.asarray(query, dtype=np.float64)
    if query_vector.ndim != 1 or query_vector.size == 0:
        raise ValueError("Query embedding must be a non-empty one-dimensional vector")

    scored = []
    for record in candidates:
        # Records without an embedding take no part in retrieval
        if record.embedding is None:
            continue
        if len(record.embedding) != query_vector.size:
            raise DimensionMismatchError(expected=query_vector.size, actual=len(record.embedding))
        scored.append(ScoredRecord(record=record, score=cosine_similarity(record.embedding, query_vector)))
    return scored


def rank_scored(query: Sequence[float], candidates: Iterable[InteractionRecord], k: int) -> List[ScoredRecord]:
    """Top-k scored candidates, highest similarity first."""
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    scored = score_candidates(query, candidates)
    # sorted() is stable, so equal scores keep their stored order
    scored = sorted(scored, key=lambda item: item.score, reverse=True)
    return scored[:k]


def rank(query: Sequence[float], candidates: Iterable[InteractionRecord], k: int) -> List[InteractionRecord]:
    """
    Rank candidates by cosine similarity to the query and return the top k.

    Args:
        query: Query embedding
        candidates: Records in stored order; those without an embedding are skipped
        k: Maximum number of results (>= 1)

    Returns:
        At most k records, most similar first
    """
    return [item.record for item in rank_scored(query, candidates, k)]
