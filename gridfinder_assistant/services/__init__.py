"""Service layer modules grouping business logic by concern.

This module provides convenience re-exports so that callers can simply do for
example `from gridfinder_assistant.services import Retriever` without having to
know which underlying module provides the symbol.
"""

from .dataset import load_events  # noqa: F401
from .embeddings import generate_embedding  # noqa: F401
from .knowledge import KnowledgeStore, build_knowledge_item, get_default_store  # noqa: F401
from .similarity import cosine_similarity, rank  # noqa: F401
from .retrieval import Retriever, retrieve  # noqa: F401
from .chat import ChatService, ChatReply, answer  # noqa: F401

__all__ = [
    "load_events",
    "generate_embedding",
    "KnowledgeStore",
    "build_knowledge_item",
    "get_default_store",
    "cosine_similarity",
    "rank",
    "Retriever",
    "retrieve",
    "ChatService",
    "ChatReply",
    "answer",
]
