from __future__ import annotations
from datetime import datetime, timezone
from flask import Blueprint, current_app, jsonify

from devevent import config
from devevent.db.mongo import ping

bp = Blueprint("api_health", __name__)


@bp.get("/health")
def health():
    uploader = current_app.extensions.get("image_uploader")
    return jsonify({
        "ok": True,
        "status": "ok",
        "time_utc": datetime.now(timezone.utc).isoformat(),
        "env": config.FLASK_ENV,
        "config": {
            "mongo_db": config.MONGO_DB,
            "events_collection": config.EVENTS_COLLECTION,
            "upload_folder": config.UPLOAD_FOLDER,
            "cloudinary_set": bool(getattr(uploader, "configured", False)),
        },
        "db": {
            "ping": ping(),
        },
    })
