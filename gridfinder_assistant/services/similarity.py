"""Cosine similarity scoring and top-k ranking of knowledge items."""

from __future__ import annotations

import math
from itertools import zip_longest
from typing import List, Sequence

from ..models import KnowledgeItem, ScoredItem

# Keeps the denominator non-zero when either vector is all zeros.
EPSILON: float = 1e-9


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``dot(a, b) / (|a| * |b| + EPSILON)``.

    A shorter vector is treated as zero-padded.
    """
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for ai, bi in zip_longest(a, b, fillvalue=0.0):
        dot += ai * bi
        norm_a += ai * ai
        norm_b += bi * bi
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b) + EPSILON)


def check_k(k: int) -> None:
    """Raise ``ValueError`` unless *k* is a non-negative integer."""
    if isinstance(k, bool) or not isinstance(k, int) or k < 0:
        raise ValueError(f"k must be a non-negative integer, got {k!r}")


def rank(
    query_vector: Sequence[float],
    items: Sequence[KnowledgeItem],
    vectors: Sequence[Sequence[float]],
    k: int,
) -> List[ScoredItem]:
    """Score every item against *query_vector* and return the best *k*.

    Results are ordered by descending score. ``sorted`` is stable, so items
    with equal scores keep their insertion order.

    Raises
    ------
    ValueError
        If *k* is not a non-negative integer or ``items`` and ``vectors``
        are not index-aligned.
    """
    check_k(k)
    if len(items) != len(vectors):
        raise ValueError(
            f"items and vectors are misaligned ({len(items)} != {len(vectors)})"
        )
    if k == 0:
        return []

    scored = [
        ScoredItem(item=item, score=cosine_similarity(query_vector, vector))
        for item, vector in zip(items, vectors)
    ]
    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    return scored[:k]

__all__ = ["EPSILON", "check_k", "cosine_similarity", "rank"]
