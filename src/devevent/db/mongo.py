from __future__ import annotations

import os
import logging
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

# Always go through devevent.config so python-dotenv is applied
from devevent import config

logger = logging.getLogger(__name__)

_CLIENT: Optional[MongoClient] = None


def _mongo_uri() -> str:
    # Prefer config (loads .env), fallback to raw env
    uri = getattr(config, "MONGODB_URI", None) or os.getenv("MONGODB_URI")
    if not uri:
        raise RuntimeError("MONGODB_URI is not set")
    return uri


def _db_name() -> str:
    return getattr(config, "MONGO_DB", None) or os.getenv("MONGO_DB") or "devevent"


def get_client() -> MongoClient:
    """Process-wide client; created on first use and reused afterwards."""
    global _CLIENT
    if _CLIENT is not None:
        return _CLIENT
    _CLIENT = MongoClient(
        _mongo_uri(),
        serverSelectionTimeoutMS=5000,
        server_api=ServerApi("1"),
    )
    return _CLIENT


def get_db():
    return get_client()[_db_name()]


def get_collection(name: str):
    return get_db()[name]


def ping() -> bool:
    try:
        get_db().command("ping")
        return True
    except Exception as e:
        logger.error("Mongo ping failed: %s", e)
        return False


def ensure_indexes(log: Optional[logging.Logger] = None) -> None:
    """
    Safe to call on startup; creates the event indexes if they don't exist.
    The unique slug index is what actually guarantees slug uniqueness across
    concurrent writers.
    """
    log = log or logger
    try:
        db = get_db()
    except RuntimeError as e:
        log.warning("[ensure_indexes] skipped: %s", e)
        return

    events = db[config.EVENTS_COLLECTION]
    try:
        events.create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
        events.create_index([("createdAt", DESCENDING)], name="created_at_desc")
    except PyMongoError as e:
        log.warning("index create failed for %s: %s", config.EVENTS_COLLECTION, e)
