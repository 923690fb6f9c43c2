"""Event dataset sources: local JSON file, hosted JSON, or MongoDB."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Mapping, Optional

import requests
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..clients.http_client import get_session
from ..clients.mongodb_client import get_events_collection
from ..config import (
    EVENTS_DATA_PATH,
    EVENTS_DATA_URL,
    EVENTS_SOURCE,
    HTTP_TIMEOUT_SECONDS,
)
from ..errors import DatasetError
from ..models import Event

logger = logging.getLogger(__name__)


def _parse_events(records: Any, source: str) -> List[Event]:
    """Turn a decoded JSON payload into events, preserving order.

    Records without an id or title are skipped; only a payload that is not
    an array is an error.
    """
    if not isinstance(records, list):
        raise DatasetError(f"{source}: expected a JSON array of events, got {type(records).__name__}")

    events: List[Event] = []
    for idx, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning("Skipping event record %d: not an object", idx)
            continue
        try:
            events.append(Event.from_record(record))
        except ValueError as exc:
            logger.warning("Skipping event record %d: %s", idx, exc)
    return events


def load_events_from_json(path: str = EVENTS_DATA_PATH) -> List[Event]:
    """Read the event dataset from a local JSON file."""
    logger.info("Loading events from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            records = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetError(f"could not read events from {path}: {exc}") from exc

    events = _parse_events(records, path)
    logger.info("Loaded %d events from %s", len(events), path)
    return events


def load_events_from_url(url: Optional[str] = EVENTS_DATA_URL) -> List[Event]:
    """Fetch the event dataset published as JSON over HTTP."""
    if not url:
        raise DatasetError("EVENTS_DATA_URL is not set")

    logger.info("Fetching events from %s", url)
    try:
        response = get_session().get(url, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise DatasetError(f"could not fetch events from {url}: {exc}") from exc

    if response.status_code != 200:
        logger.error("Error fetching events: %s - %s", response.status_code, response.text[:200])
        raise DatasetError(f"events endpoint returned HTTP {response.status_code}")

    try:
        records = response.json()
    except ValueError as exc:
        raise DatasetError(f"events endpoint returned invalid JSON: {exc}") from exc

    events = _parse_events(records, url)
    logger.info("Fetched %d events from %s", len(events), url)
    return events


def load_events_from_mongodb(collection: Optional[Collection] = None) -> List[Event]:
    """Read event documents from MongoDB in insertion order."""
    if collection is None:
        collection = get_events_collection()

    try:
        documents = list(collection.find({}).sort("_id", 1))
    except PyMongoError as exc:
        raise DatasetError(f"could not read events from MongoDB: {exc}") from exc

    events = _parse_events(documents, f"mongodb:{collection.name}")
    logger.info("Loaded %d events from MongoDB collection '%s'", len(events), collection.name)
    return events


def load_events(source: str = EVENTS_SOURCE) -> List[Event]:
    """Load events from the configured source (``json``, ``url`` or ``mongodb``)."""
    if source == "json":
        return load_events_from_json()
    if source == "url":
        return load_events_from_url()
    if source == "mongodb":
        return load_events_from_mongodb()
    raise DatasetError(f"unknown EVENTS_SOURCE: {source!r}")

__all__ = [
    "load_events",
    "load_events_from_json",
    "load_events_from_url",
    "load_events_from_mongodb",
]
