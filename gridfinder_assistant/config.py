"""Centralised configuration for gridfinder_assistant.

Environment variables are loaded once and all related constants are
grouped by service for easier maintenance.
"""

from __future__ import annotations

import os
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Core credentials (from environment)
# ---------------------------------------------------------------------------
OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
MONGODB_URI: str | None = os.getenv("MONGODB_URI")

# ---------------------------------------------------------------------------
# OpenAI settings
# Same embedding model for corpus and queries, otherwise scores are meaningless.
# ---------------------------------------------------------------------------
EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SECONDS: float = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))

# ---------------------------------------------------------------------------
# Event dataset source
# accepted values: "json", "url", "mongodb"
# ---------------------------------------------------------------------------
EVENTS_SOURCE: str = os.getenv("EVENTS_SOURCE", "json").lower()
EVENTS_DATA_PATH: str = os.getenv(
    "EVENTS_DATA_PATH", os.path.join("public", "data", "fallback-events.json")
)
EVENTS_DATA_URL: str | None = os.getenv("EVENTS_DATA_URL")
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "gridfinder")
MONGODB_COLLECTION: str = os.getenv("MONGODB_COLLECTION", "events")
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------
RETRIEVAL_TOP_K: int = int(os.getenv("RETRIEVAL_TOP_K", "6"))
# 1 keeps the knowledge build strictly sequential
EMBEDDING_MAX_WORKERS: int = int(os.getenv("EMBEDDING_MAX_WORKERS", "1"))

# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    # credentials
    "OPENAI_API_KEY",
    "MONGODB_URI",
    # openai
    "EMBEDDING_MODEL",
    "CHAT_MODEL",
    "OPENAI_TIMEOUT_SECONDS",
    # dataset
    "EVENTS_SOURCE",
    "EVENTS_DATA_PATH",
    "EVENTS_DATA_URL",
    "MONGODB_DATABASE",
    "MONGODB_COLLECTION",
    "HTTP_TIMEOUT_SECONDS",
    # retrieval
    "RETRIEVAL_TOP_K",
    "EMBEDDING_MAX_WORKERS",
]
