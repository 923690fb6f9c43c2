"""Top-level package for the GridFinder chat assistant.

Exposes the retrieval and chat helpers so callers can do
`from gridfinder_assistant import retrieve, answer` or run
`python -m gridfinder_assistant "any karting in Austin?"`.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("gridfinder-assistant")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .services.retrieval import retrieve  # convenience re-export
from .services.chat import answer  # convenience re-export

__all__ = ["retrieve", "answer", "__version__"]
