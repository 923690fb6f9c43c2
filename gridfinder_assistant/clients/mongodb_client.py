"""Singleton accessor for the MongoDB client."""

from __future__ import annotations

from pymongo import MongoClient
from pymongo.collection import Collection

from ..config import MONGODB_COLLECTION, MONGODB_DATABASE, MONGODB_URI

_client: MongoClient | None = None


def get_mongo_client() -> MongoClient:
    """Return a singleton :class:`pymongo.MongoClient`."""
    global _client
    if _client is None:
        if not MONGODB_URI:
            raise EnvironmentError("MONGODB_URI is not set in environment variables")
        _client = MongoClient(MONGODB_URI)
    return _client


def get_events_collection() -> Collection:
    """Return the collection holding the site's event documents."""
    return get_mongo_client()[MONGODB_DATABASE][MONGODB_COLLECTION]

__all__ = ["get_mongo_client", "get_events_collection"]
