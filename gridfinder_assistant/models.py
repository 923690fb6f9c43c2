"""Domain models used across the project."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

# Type alias for an embedding vector (dimensionality is whatever the provider returns)
Embedding = List[float]


def _as_text(value: Any) -> Optional[str]:
    """Normalise a raw record value to a non-empty string or ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


@dataclass(frozen=True, slots=True)
class Event:
    """A karting / track-day event as published on the site."""

    id: str
    title: str
    org: Optional[str] = None
    type: Optional[str] = None
    beginner_friendly: bool = False
    start: Optional[str] = None
    end: Optional[str] = None
    venue: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    register_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Event":
        """Build an :class:`Event` from a raw dataset record.

        Accepts the camelCase keys of the published JSON (``beginnerFriendly``,
        ``registerUrl``), their snake_case equivalents and the database column
        names (``startDate``, ``endDate``, ``url``, ``_id``).

        Raises
        ------
        ValueError
            If the record has no identifier or no title.
        """
        event_id = _as_text(_first(record, "id", "event_id", "_id"))
        title = _as_text(record.get("title"))
        if not event_id or not title:
            raise ValueError(f"event record is missing an id or title: {dict(record)!r}")

        return cls(
            id=event_id,
            title=title,
            org=_as_text(record.get("org")),
            type=_as_text(record.get("type")),
            beginner_friendly=bool(_first(record, "beginnerFriendly", "beginner_friendly")),
            start=_as_text(_first(record, "start", "startDate")),
            end=_as_text(_first(record, "end", "endDate")),
            venue=_as_text(record.get("venue")),
            city=_as_text(record.get("city")),
            region=_as_text(record.get("region")),
            country=_as_text(record.get("country")),
            register_url=_as_text(_first(record, "registerUrl", "register_url", "url")),
        )


@dataclass(frozen=True, slots=True)
class KnowledgeItem:
    """One embeddable snippet describing a single event."""

    id: str
    text: str
    url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScoredItem:
    """A :class:`KnowledgeItem` paired with its cosine similarity to a query."""

    item: KnowledgeItem
    score: float


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """A single turn of the chat history (``role`` is ``"user"`` or ``"bot"``)."""

    role: str
    content: str

    def to_openai(self) -> Dict[str, str]:
        """Return the message in the OpenAI chat-completions shape."""
        return {
            "role": "assistant" if self.role == "bot" else "user",
            "content": self.content,
        }


__all__ = ["Event", "KnowledgeItem", "ScoredItem", "ChatMessage", "Embedding"]
