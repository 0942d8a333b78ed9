from __future__ import annotations

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from devevent.errors import ValidationFailure
from devevent.models.event import serialize_event, validate_event


def test_validate_event_trims_and_cleans(event_fields):
    doc = validate_event(event_fields(mode=" Online ", tags=[" python ", "", "web"]))
    assert doc["title"] == "PyCon Meetup 2025"
    assert doc["mode"] == "online"
    assert doc["tags"] == ["python", "web"]
    assert "slug" not in doc


def test_validate_event_ignores_caller_supplied_slug(event_fields):
    doc = validate_event(event_fields(slug="hand-made", createdAt="yesterday"))
    assert "slug" not in doc
    assert "createdAt" not in doc


def test_validate_event_collects_every_problem(event_fields):
    with pytest.raises(ValidationFailure) as exc:
        validate_event(event_fields(title="   ", mode="in-person", agenda=[], tags=None))
    problems = exc.value.problems
    assert "Title is required" in problems
    assert any(p.startswith("Mode must be one of") for p in problems)
    assert "Agenda must have at least one item" in problems
    assert "Tags must have at least one item" in problems


def test_validate_event_image_requirement(event_fields):
    fields = event_fields(image=None)
    with pytest.raises(ValidationFailure, match="Image URL is required"):
        validate_event(fields)
    assert "image" not in validate_event(fields, require_image=False)


def test_serialize_event():
    oid = ObjectId()
    created = datetime(2025, 11, 5, 18, 30)
    out = serialize_event({"_id": oid, "title": "x", "createdAt": created, "updatedAt": created.replace(tzinfo=timezone.utc)})
    assert out["id"] == str(oid)
    assert "_id" not in out
    assert out["createdAt"] == "2025-11-05T18:30:00+00:00"
    assert out["updatedAt"] == out["createdAt"]
