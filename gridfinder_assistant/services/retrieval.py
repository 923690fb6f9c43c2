"""Query path: free-text question → most similar knowledge items."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..models import KnowledgeItem, ScoredItem
from ..utils.text_cleaning import preview
from .knowledge import EmbedFn, KnowledgeStore, get_default_store
from .similarity import check_k, rank

logger = logging.getLogger(__name__)

DEFAULT_TOP_K: int = 5


class Retriever:
    """Ranks the items of a :class:`KnowledgeStore` against a text query.

    The query is embedded with the store's own embedding function unless
    *embed* is given explicitly; corpus and query vectors must come from the
    same model for cosine scores to mean anything.
    """

    def __init__(self, store: KnowledgeStore, embed: Optional[EmbedFn] = None) -> None:
        self.store = store
        self._embed = embed or store.embed

    def retrieve_scored(self, query: str, k: int = DEFAULT_TOP_K) -> List[ScoredItem]:
        """Return up to *k* items with their scores, best first."""
        check_k(k)
        self.store.ensure_loaded()

        if not query or not query.strip():
            return []

        items, vectors = self.store.snapshot()
        query_vector = self._embed(query)
        results = rank(query_vector, items, vectors, k)

        logger.info(
            "Retrieved %d/%d items for query: %s",
            len(results),
            len(items),
            preview(query, 80),
        )
        return results

    def retrieve(self, query: str, k: int = DEFAULT_TOP_K) -> List[KnowledgeItem]:
        """Return up to *k* items, most relevant first."""
        return [scored.item for scored in self.retrieve_scored(query, k)]


def retrieve(query: str, k: int = DEFAULT_TOP_K) -> List[KnowledgeItem]:
    """Retrieve from the process-wide default store."""
    return Retriever(get_default_store()).retrieve(query, k)

__all__ = ["Retriever", "retrieve", "DEFAULT_TOP_K"]
