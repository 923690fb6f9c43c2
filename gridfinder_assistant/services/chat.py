"""Chat assistant grounded in the site's event data.

The latest message of the conversation is used as the retrieval query; the
retrieved events are formatted as a numbered context block and sent ahead of
the full history to the chat model.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from openai import OpenAI

from ..clients.openai_client import get_openai
from ..config import CHAT_MODEL, RETRIEVAL_TOP_K
from ..errors import ChatRequestError
from ..models import ChatMessage, KnowledgeItem
from .retrieval import Retriever
from .knowledge import get_default_store

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION: str = """\
You are GridFinder's assistant. Ground answers ONLY in the provided "Website context".
If relevant facts are missing, say briefly that you don't have that info.

Formatting rules:
- If the user asks about events, reply as a short bullet list:
  - **Title** — {dates}; {venue}, {city}{, region}
    [Details](/events/{id}) • [Register]({registerUrl, if present})
- If nothing relevant is found, reply: "I couldn't find that in the site data."
Keep it concise, friendly, and avoid speculation.
"""

NO_CONTEXT: str = "(no relevant context found)"
APOLOGY: str = "Sorry, something went wrong while answering. Please try again in a moment."

MessageLike = Union[ChatMessage, Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class ChatReply:
    """Assistant answer plus the ids of the events it was grounded on."""

    reply: str
    sources: List[str]
    error: bool = False


def format_context(hits: Sequence[KnowledgeItem]) -> str:
    """Render retrieved items as ``[#n] url`` headers followed by their text."""
    if not hits:
        return NO_CONTEXT
    return "\n\n".join(
        f"[#{i}] {hit.url or ''}\n{hit.text}" for i, hit in enumerate(hits, start=1)
    )


def parse_messages(raw: Any) -> List[ChatMessage]:
    """Validate a chat payload and return it as :class:`ChatMessage` objects.

    Raises
    ------
    ChatRequestError
        If *raw* is not a non-empty list of ``{role, content}`` messages.
    """
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ChatRequestError("No messages")

    messages: List[ChatMessage] = []
    for idx, entry in enumerate(raw):
        if isinstance(entry, ChatMessage):
            messages.append(entry)
            continue
        if not isinstance(entry, Mapping):
            raise ChatRequestError(f"message {idx} is not an object")
        role = entry.get("role")
        content = entry.get("content")
        if role not in ("user", "bot"):
            raise ChatRequestError(f"message {idx} has invalid role {role!r}")
        if not isinstance(content, str):
            raise ChatRequestError(f"message {idx} has no text content")
        messages.append(ChatMessage(role=role, content=content))
    return messages


def build_messages(history: Sequence[ChatMessage], context: str) -> List[Dict[str, str]]:
    """Assemble the chat-completions payload: system, context, then history."""
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {"role": "user", "content": f"Website context:\n{context}"},
        *(message.to_openai() for message in history),
    ]


class ChatService:
    """Answers a conversation using retrieved events as grounding."""

    def __init__(
        self,
        retriever: Retriever,
        client: Optional[OpenAI] = None,
        model: str = CHAT_MODEL,
        top_k: int = RETRIEVAL_TOP_K,
    ) -> None:
        self.retriever = retriever
        self._client = client
        self.model = model
        self.top_k = top_k

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = get_openai()
        return self._client

    def reply(self, raw_messages: Sequence[MessageLike]) -> ChatReply:
        """Answer the conversation in *raw_messages*.

        Malformed payloads raise :class:`ChatRequestError`. Retrieval and model
        failures are logged and turned into a generic apology.
        """
        history = parse_messages(raw_messages)
        query = history[-1].content

        try:
            hits = self.retriever.retrieve(query, self.top_k)
            payload = build_messages(history, format_context(hits))
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=0.2,
            )
            text = (completion.choices[0].message.content or "").strip()
        except Exception:
            logger.exception("Chat failed for query: %s", query[:80])
            return ChatReply(reply=APOLOGY, sources=[], error=True)

        logger.info("Answered chat with %d context items", len(hits))
        return ChatReply(reply=text, sources=[hit.id for hit in hits])


_default_service: Optional[ChatService] = None
_default_service_lock = threading.Lock()


def get_default_service() -> ChatService:
    """Return a chat service bound to the process-wide knowledge store."""
    global _default_service
    with _default_service_lock:
        if _default_service is None:
            _default_service = ChatService(Retriever(get_default_store()))
    return _default_service


def answer(messages: Sequence[MessageLike]) -> ChatReply:
    """Answer *messages* with the default chat service."""
    return get_default_service().reply(messages)

__all__ = [
    "ChatService",
    "ChatReply",
    "SYSTEM_INSTRUCTION",
    "APOLOGY",
    "format_context",
    "parse_messages",
    "build_messages",
    "answer",
]
