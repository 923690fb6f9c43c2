"""Embedding utilities using the OpenAI API."""

from __future__ import annotations

import logging
from typing import Optional

from openai import OpenAI

from ..clients.openai_client import get_openai
from ..config import EMBEDDING_MODEL
from ..models import Embedding
from ..utils.text_cleaning import preview

logger = logging.getLogger(__name__)


def generate_embedding(text: str, client: Optional[OpenAI] = None) -> Embedding:
    """Generate a vector embedding for *text* using the configured model.

    Every call goes to the API; nothing is cached here. SDK errors (network,
    auth, quota) propagate unchanged.
    """
    if client is None:
        client = get_openai()

    logger.debug("Generating embedding for text: %s", preview(text))
    response = client.embeddings.create(model=EMBEDDING_MODEL, input=text)
    embedding = list(response.data[0].embedding)
    logger.debug("Generated embedding of length %d", len(embedding))
    return embedding

__all__ = ["generate_embedding"]
