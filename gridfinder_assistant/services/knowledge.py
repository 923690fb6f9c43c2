"""In-memory knowledge store: event snippets and their embeddings.

The store is built at most once per :class:`KnowledgeStore` instance. Items and
vectors are committed together as a single snapshot, so callers either see
nothing or a fully populated, index-aligned pair. Concurrent first callers
share one in-flight build instead of each embedding the whole dataset.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import quote

from ..config import EMBEDDING_MAX_WORKERS
from ..errors import EmbeddingError
from ..models import Embedding, Event, KnowledgeItem
from ..utils.text_cleaning import join_present
from .dataset import load_events
from .embeddings import generate_embedding

logger = logging.getLogger(__name__)

EventLoader = Callable[[], Sequence[Event]]
EmbedFn = Callable[[str], Embedding]
_Snapshot = Tuple[Tuple[KnowledgeItem, ...], Tuple[Embedding, ...]]


def build_knowledge_item(event: Event) -> KnowledgeItem:
    """Render *event* as one fact per line, skipping absent fields.

    Field order is fixed: id, title, org, type, beginnerFriendly, when,
    where, register.
    """
    when = join_present([event.start, event.end], " – ")
    where = join_present([event.venue, event.city, event.region, event.country], ", ")
    lines = [
        f"id: {event.id}",
        f"title: {event.title}",
        f"org: {event.org}" if event.org else "",
        f"type: {event.type}" if event.type else "",
        "beginnerFriendly: true" if event.beginner_friendly else "",
        f"when: {when}" if when else "",
        f"where: {where}" if where else "",
        f"register: {event.register_url}" if event.register_url else "",
    ]
    return KnowledgeItem(
        id=event.id,
        url=f"/events/{quote(event.id, safe='')}",
        text="\n".join(line for line in lines if line),
    )


class KnowledgeStore:
    """Lazily built, index-aligned (items, vectors) cache over the event dataset.

    Parameters
    ----------
    loader
        Returns the ordered event dataset. Called once per build attempt.
    embed
        Text → vector function. Must be the same function the query path uses.
    max_workers
        ``1`` embeds items sequentially; larger values use a bounded thread
        pool. Output order always matches the dataset order.
    """

    def __init__(
        self,
        loader: EventLoader = load_events,
        embed: EmbedFn = generate_embedding,
        max_workers: int = EMBEDDING_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._loader = loader
        self._embed = embed
        self._max_workers = max_workers
        self._lock = threading.Lock()
        self._snapshot: Optional[_Snapshot] = None
        self._inflight: Optional[Future] = None
        self._build_count = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def embed(self) -> EmbedFn:
        return self._embed

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def build_count(self) -> int:
        """Number of completed embedding passes over the dataset."""
        return self._build_count

    @property
    def items(self) -> Tuple[KnowledgeItem, ...]:
        return self._snapshot[0] if self._snapshot is not None else ()

    @property
    def vectors(self) -> Tuple[Embedding, ...]:
        return self._snapshot[1] if self._snapshot is not None else ()

    def snapshot(self) -> _Snapshot:
        """Return ``(items, vectors)`` from one consistent build.

        Raises
        ------
        RuntimeError
            If the store has not been loaded yet.
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise RuntimeError("knowledge store is not loaded; call ensure_loaded() first")
        return snapshot

    def __len__(self) -> int:
        return len(self.items)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------
    def ensure_loaded(self) -> None:
        """Build the store unless it is already built.

        Concurrent callers wait on the single in-flight build and receive its
        error if it fails. A failed build commits nothing; the next call
        starts a fresh attempt.
        """
        if self._snapshot is not None:
            return

        with self._lock:
            if self._snapshot is not None:
                return
            future = self._inflight
            owner = future is None
            if owner:
                future = self._inflight = Future()

        if not owner:
            logger.debug("Waiting for in-flight knowledge build")
            future.result()
            return

        try:
            snapshot = self._build()
        except BaseException as exc:
            with self._lock:
                self._inflight = None
            future.set_exception(exc)
            raise

        with self._lock:
            self._snapshot = snapshot
            self._build_count += 1
            self._inflight = None
        future.set_result(None)

    def _build(self) -> _Snapshot:
        logger.info("Building knowledge store…")
        events = self._loader()
        items = [build_knowledge_item(event) for event in events]
        vectors = self._embed_all([item.text for item in items])

        if len(vectors) != len(items):
            raise EmbeddingError(
                f"expected {len(items)} embeddings, got {len(vectors)}"
            )
        dimensions = {len(v) for v in vectors}
        if len(dimensions) > 1:
            raise EmbeddingError(f"inconsistent embedding dimensions: {sorted(dimensions)}")

        logger.info(
            "Knowledge store ready: %d items, %s dimensions",
            len(items),
            next(iter(dimensions), 0),
        )
        return tuple(items), tuple(vectors)

    def _embed_all(self, texts: List[str]) -> List[Embedding]:
        if self._max_workers == 1 or len(texts) <= 1:
            return [self._embed(text) for text in texts]

        # Executor.map yields results in submission order.
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            return list(pool.map(self._embed, texts))


_default_store: Optional[KnowledgeStore] = None
_default_store_lock = threading.Lock()


def get_default_store() -> KnowledgeStore:
    """Return the process-wide store wired to the configured dataset and OpenAI."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = KnowledgeStore()
    return _default_store

__all__ = ["KnowledgeStore", "build_knowledge_item", "get_default_store"]
