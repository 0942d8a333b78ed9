from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Set

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from devevent import config
from devevent.db import mongo
from devevent.db.lifecycle import prepare_event
from devevent.errors import PersistenceFailure
from devevent.models.event import validate_event

logger = logging.getLogger(__name__)


class EventStore:
    """
    Persistence of Event records.

    Built once at startup and shared by the request handlers. The collection
    is resolved on first use so the app can start before Mongo is reachable.
    """

    def __init__(self, collection=None, max_retries: Optional[int] = None):
        self._collection = collection
        self.max_retries = config.SLUG_MAX_RETRIES if max_retries is None else max_retries

    @property
    def collection(self):
        if self._collection is None:
            try:
                self._collection = mongo.get_collection(config.EVENTS_COLLECTION)
            except RuntimeError as e:
                raise PersistenceFailure(str(e), cause=e) from e
        return self._collection

    def slug_taken(self, slug: str, exclude_id: Optional[ObjectId] = None) -> bool:
        query: Dict[str, Any] = {"slug": slug}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        try:
            return self.collection.find_one(query, {"_id": 1}) is not None
        except PyMongoError as e:
            logger.error("slug lookup failed for %s: %s", slug, e)
            raise PersistenceFailure(f"could not check slug: {e}", cause=e) from e

    def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate, derive canonical fields and insert a new event.

        The pre-insert slug lookup is only a best-effort check; the unique
        index on `slug` is the real guard. When it rejects the insert the
        colliding slug is remembered and the slug is derived again.
        """
        doc = validate_event(fields)
        doc["_id"] = ObjectId()
        rejected: Set[str] = set()

        def is_taken(slug: str) -> bool:
            return slug in rejected or self.slug_taken(slug, exclude_id=doc["_id"])

        previous: Optional[Dict[str, Any]] = None
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            prepare_event(doc, is_taken, previous=previous)
            now = datetime.now(timezone.utc)
            doc["createdAt"] = now
            doc["updatedAt"] = now
            try:
                self.collection.insert_one(doc)
            except DuplicateKeyError as e:
                logger.warning(
                    "slug %r taken at insert time (attempt %d/%d)",
                    doc["slug"], attempt + 1, self.max_retries + 1,
                )
                rejected.add(doc["slug"])
                # date and time are canonical by now; only the slug is derived again
                previous = {"date": doc["date"], "time": doc["time"]}
                last_error = e
                continue
            except PyMongoError as e:
                logger.error("event insert failed: %s", e)
                raise PersistenceFailure(f"could not store event: {e}", cause=e) from e
            logger.info("created event %s (slug=%s)", doc["_id"], doc["slug"])
            return doc

        raise PersistenceFailure(
            f"could not find a free slug after {self.max_retries + 1} attempts",
            cause=last_error,
        )

    def list_recent(self) -> List[Dict[str, Any]]:
        """All events, newest first."""
        try:
            cur = self.collection.find({}).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            return list(cur)
        except PyMongoError as e:
            logger.error("event listing failed: %s", e)
            raise PersistenceFailure(f"could not list events: {e}", cause=e) from e

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        try:
            return self.collection.find_one({"slug": slug})
        except PyMongoError as e:
            logger.error("event lookup failed for %s: %s", slug, e)
            raise PersistenceFailure(f"could not load event: {e}", cause=e) from e
