"""
Derivation of the canonical fields (slug, date, time) right before an event
is written. Nothing else sets these fields.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from devevent.utils.normalize import normalize_date, normalize_time
from devevent.utils.slug import generate_slug


def resolve_unique_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """First of base, base-1, base-2, ... that `is_taken` reports as free."""
    candidate = base
    counter = 1
    while is_taken(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


def _changed(field: str, doc: Mapping[str, Any], previous: Optional[Mapping[str, Any]]) -> bool:
    return previous is None or previous.get(field) != doc.get(field)


def prepare_event(
    doc: Dict[str, Any],
    is_taken: Callable[[str], bool],
    previous: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Assign slug and canonical date/time on `doc` in place and return it.

    `previous` is the stored version of the record; None means the record is
    new and every field is derived. Normalization errors propagate untouched.
    """
    if _changed("title", doc, previous):
        doc["slug"] = resolve_unique_slug(generate_slug(doc["title"]), is_taken)

    if _changed("date", doc, previous):
        doc["date"] = normalize_date(doc["date"])

    if _changed("time", doc, previous):
        doc["time"] = normalize_time(doc["time"])

    return doc
