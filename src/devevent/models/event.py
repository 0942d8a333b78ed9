from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from devevent.errors import ValidationFailure

MODES = ("online", "offline", "hybrid")

# Required free-text fields; stored trimmed
TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "venue",
    "location",
    "audience",
    "organizer",
)

# Required, stored as given until the lifecycle controller normalizes them
RAW_FIELDS = ("date", "time")

LIST_FIELDS = ("agenda", "tags")


def _clean_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def validate_event(fields: Mapping[str, Any], require_image: bool = True) -> Dict[str, Any]:
    """
    Build a clean candidate document from submitted fields.
    Collects every problem and raises ValidationFailure listing them all.
    """
    problems: List[str] = []
    doc: Dict[str, Any] = {}

    for name in TEXT_FIELDS + RAW_FIELDS:
        value = fields.get(name)
        if not isinstance(value, str) or not value.strip():
            problems.append(f"{name.capitalize()} is required")
            continue
        doc[name] = value.strip()

    mode = fields.get("mode")
    mode = mode.strip().lower() if isinstance(mode, str) else None
    if not mode:
        problems.append("Mode is required")
    elif mode not in MODES:
        problems.append(f"Mode must be one of: {', '.join(MODES)}")
    else:
        doc["mode"] = mode

    for name in LIST_FIELDS:
        items = _clean_list(fields.get(name))
        if not items:
            problems.append(f"{name.capitalize()} must have at least one item")
            continue
        doc[name] = items

    image = fields.get("image")
    if isinstance(image, str) and image.strip():
        doc["image"] = image.strip()
    elif require_image:
        problems.append("Image URL is required")

    if problems:
        raise ValidationFailure(problems)
    return doc


def _iso(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            # BSON datetimes come back naive; they are UTC
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


def serialize_event(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """JSON-safe view of a stored event (`_id` -> `id`, timestamps as ISO strings)."""
    out: Dict[str, Any] = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        elif key in ("createdAt", "updatedAt"):
            out[key] = _iso(value)
        else:
            out[key] = value
    return out
