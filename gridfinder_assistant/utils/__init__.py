"""Utility functions for the GridFinder assistant.

Re-exports the text helpers so that imports like
`from ..utils import join_present` work as expected.
"""

from .text_cleaning import join_present, preview  # noqa: F401

__all__ = [
    "join_present",
    "preview",
]
