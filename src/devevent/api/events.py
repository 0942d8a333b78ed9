from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request

from devevent.errors import EventError, MissingImage
from devevent.models.event import LIST_FIELDS, RAW_FIELDS, TEXT_FIELDS, serialize_event, validate_event

bp = Blueprint("api_events", __name__)

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"


def _store():
    return current_app.extensions["event_store"]


def _uploader():
    return current_app.extensions["image_uploader"]


def _list_values(form, name: str) -> List[str]:
    """
    Repeated form fields, or a single JSON array value.
    `tags` also accepts one comma-separated value.
    """
    values = form.getlist(name)
    if len(values) == 1:
        raw = values[0].strip()
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return [str(v) for v in parsed if v is not None]
        if name == "tags" and "," in raw:
            return raw.split(",")
    return values


def _form_fields(form) -> Dict[str, Any]:
    fields: Dict[str, Any] = {name: form.get(name) for name in TEXT_FIELDS + RAW_FIELDS + ("mode",)}
    for name in LIST_FIELDS:
        fields[name] = _list_values(form, name)
    return fields


def _failure(e: EventError):
    body = {"message": "event creation failed"}
    body.update(e.to_dict())
    return jsonify(body), 400


@bp.post("/events")
def create_event():
    """
    POST /api/events  (multipart/form-data)
    Event fields as text parts, agenda/tags repeated, plus one `image` file.
    """
    file = request.files.get(IMAGE_FIELD)
    if file is None or not file.filename:
        e = MissingImage()
        body = {"message": e.message}
        body.update(e.to_dict())
        return jsonify(body), 400

    fields = _form_fields(request.form)
    try:
        # reject bad submissions before anything is uploaded
        validate_event(fields, require_image=False)
        fields[IMAGE_FIELD] = _uploader().upload(file.read(), file.filename, file.mimetype)
        created = _store().create(fields)
    except EventError as e:
        logger.error("event creation failed: %s: %s", e.kind, e)
        return _failure(e)

    return jsonify({"message": "event created successfully", "event": serialize_event(created)}), 201


@bp.get("/events")
def list_events():
    """
    GET /api/events
    Every stored event, newest first.
    """
    try:
        events = [serialize_event(doc) for doc in _store().list_recent()]
    except EventError as e:
        logger.error("event listing failed: %s", e)
        return jsonify({"message": "event fetching failed"}), 500
    return jsonify({"message": "events fetched successfully", "events": events})


@bp.get("/events/<slug>")
def get_event(slug: str):
    """
    GET /api/events/<slug>
    """
    try:
        doc = _store().find_by_slug(slug)
    except EventError as e:
        logger.error("event lookup failed: %s", e)
        return jsonify({"message": "event fetching failed"}), 500
    if doc is None:
        return jsonify({"message": "event not found"}), 404
    return jsonify({"message": "event fetched successfully", "event": serialize_event(doc)})
