"""End-to-end workflows built on the service layer."""

from .chat_pipeline import run  # noqa: F401

__all__ = ["run"]
