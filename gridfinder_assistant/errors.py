"""Exception types raised by gridfinder_assistant.

SDK errors (``openai.OpenAIError`` and friends) are never wrapped; only
failures that originate in this package get their own type.
"""

from __future__ import annotations


class GridFinderError(Exception):
    """Base class for errors raised by this package."""


class DatasetError(GridFinderError):
    """The event dataset could not be read or parsed."""


class EmbeddingError(GridFinderError):
    """The embedding provider returned vectors of inconsistent dimensionality."""


class ChatRequestError(GridFinderError):
    """A chat request payload is malformed (missing or invalid messages)."""


__all__ = ["GridFinderError", "DatasetError", "EmbeddingError", "ChatRequestError"]
