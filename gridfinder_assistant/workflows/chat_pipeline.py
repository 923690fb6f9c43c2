"""One-shot question answering against the site's event data."""

from __future__ import annotations

import logging
from typing import Optional

from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from ..services.chat import ChatReply, ChatService, get_default_service

logger = logging.getLogger(__name__)


def run(question: str, service: Optional[ChatService] = None) -> ChatReply:
    """Ask the assistant a single *question* and return its reply."""
    logger.info("Starting GridFinder assistant")

    if service is None:
        service = get_default_service()

    result = service.reply([{"role": "user", "content": question}])
    _log_stats(service, result)
    return result


def _log_stats(service: ChatService, result: ChatReply) -> None:
    logger.info("=== GridFinder Assistant Statistics ===")
    logger.info("Knowledge items indexed: %d", len(service.retriever.store))
    logger.info("Embedding passes: %d", service.retriever.store.build_count)
    logger.info("Events used as context: %d", len(result.sources))
    logger.info("Answered without error: %s", not result.error)
    logger.info("=======================================")

__all__ = ["run"]
