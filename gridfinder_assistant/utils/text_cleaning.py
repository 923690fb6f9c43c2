"""Shared text helpers used across services."""

from __future__ import annotations

from typing import Iterable, Optional

# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def join_present(values: Iterable[Optional[str]], separator: str) -> str:
    """Join the non-empty entries of *values* with *separator*.

    ``None`` and blank strings are skipped, so ``join_present([a, None, b], ", ")``
    never produces a dangling separator.
    """
    return separator.join(v for v in values if v and v.strip())


def preview(text: str, limit: int = 50) -> str:
    """Return a single-line preview of *text* suitable for log messages."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[:limit] + "…"

__all__ = ["join_present", "preview"]
