"""
Cosine similarity ranking over stored interactions.
"""

import math

import numpy as np
import pytest

from ragwriter.core.errors import DimensionMismatchError
from ragwriter.vector.similarity import cosine_similarity, rank, rank_scored, UNDEFINED_SCORE
from ragwriter.vector.types import InteractionRecord


def make_record(record_id, embedding, prompt=None):
    return InteractionRecord(
        id=record_id,
        prompt=prompt or f"question {record_id}",
        response=f"answer {record_id}",
        embedding=embedding
    )


def test_cosine_similarity_of_vector_with_itself():
    """A non-zero vector is perfectly similar to itself."""
    v = [0.3, -1.2, 4.5, 0.01]
    assert abs(cosine_similarity(v, v) - 1.0) < 1e-9


def test_cosine_similarity_orthogonal_and_opposite():
    assert abs(cosine_similarity([1.0, 0.0], [0.0, 1.0])) < 1e-12
    assert abs(cosine_similarity([1.0, 0.0], [-2.0, 0.0]) + 1.0) < 1e-12


def test_cosine_similarity_ignores_magnitude():
    assert abs(cosine_similarity([1.0, 2.0], [10.0, 20.0]) - 1.0) < 1e-9


def test_cosine_similarity_zero_norm_is_undefined_not_nan():
    score = cosine_similarity([0.0, 0.0], [1.0, 0.0])
    assert score == UNDEFINED_SCORE
    assert not math.isnan(score)


def test_cosine_similarity_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1.0, 0.0, 0.0], [1.0, 0.0])


def test_rank_reference_example():
    """Query [1,0] over [1,0], [0,1], [0.9,0.1] returns first and third records."""
    records = [
        make_record(1, [1.0, 0.0]),
        make_record(2, [0.0, 1.0]),
        make_record(3, [0.9, 0.1]),
    ]

    results = rank([1.0, 0.0], records, k=2)

    assert [r.id for r in results] == [1, 3]


def test_rank_returns_descending_scores():
    rng = np.random.default_rng(42)
    records = [make_record(i, rng.normal(size=8).tolist()) for i in range(25)]
    query = rng.normal(size=8).tolist()

    scored = rank_scored(query, records, k=10)

    assert len(scored) == 10
    for current, following in zip(scored, scored[1:]):
        assert current.score >= following.score


def test_rank_never_exceeds_k_and_skips_missing_embeddings():
    records = [
        make_record(1, None),
        make_record(2, [1.0, 0.0]),
        make_record(3, None),
        make_record(4, [0.5, 0.5]),
        make_record(5, [0.0, 1.0]),
    ]

    results = rank([1.0, 0.0], records, k=2)

    assert len(results) == 2
    assert all(r.embedding is not None for r in results)


def test_rank_with_k_larger_than_candidates_returns_all_ordered():
    records = [
        make_record(1, [0.0, 1.0]),
        make_record(2, [1.0, 0.0]),
        make_record(3, [1.0, 1.0]),
    ]

    results = rank([1.0, 0.0], records, k=10)

    assert [r.id for r in results] == [2, 3, 1]


def test_rank_ties_keep_stored_order():
    """Equal scores keep their original relative order."""
    records = [
        make_record(1, [2.0, 0.0]),
        make_record(2, [0.0, 1.0]),
        make_record(3, [1.0, 0.0]),
        make_record(4, [5.0, 0.0]),
    ]

    results = rank([1.0, 0.0], records, k=3)

    assert [r.id for r in results] == [1, 3, 4]


def test_rank_zero_norm_candidate_sorts_last():
    records = [
        make_record(1, [0.0, 0.0]),
        make_record(2, [-1.0, 0.0]),
        make_record(3, [1.0, 0.0]),
    ]

    results = rank([1.0, 0.0], records, k=3)

    assert [r.id for r in results] == [3, 2, 1]


def test_rank_zero_query_keeps_stored_order():
    records = [make_record(1, [1.0, 0.0]), make_record(2, [0.0, 1.0])]

    results = rank([0.0, 0.0], records, k=2)

    assert [r.id for r in results] == [1, 2]


def test_rank_empty_candidates():
    assert rank([1.0, 0.0], [], k=3) == []


def test_rank_requires_positive_k():
    with pytest.raises(ValueError):
        rank([1.0, 0.0], [make_record(1, [1.0, 0.0])], k=0)


def test_rank_dimension_mismatch_is_contract_violation():
    records = [make_record(1, [1.0, 0.0, 0.0])]

    with pytest.raises(DimensionMismatchError) as exc_info:
        rank([1.0, 0.0], records, k=1)

    assert exc_info.value.expected == 2
    assert exc_info.value.actual == 3
