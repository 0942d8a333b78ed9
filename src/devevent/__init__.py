from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from devevent import config


def create_app(testing: bool = False, store=None, uploader=None) -> Flask:
    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["TESTING"] = testing
    CORS(app, origins=config.CORS_ORIGINS)

    # Ensure DB indexes early (safe to run multiple times)
    from devevent.db.mongo import ensure_indexes
    ensure_indexes(app.logger)

    # One store / uploader per process, shared by every request
    from devevent.db.events import EventStore
    from devevent.media.cloudinary import CloudinaryUploader
    app.extensions["event_store"] = store if store is not None else EventStore()
    app.extensions["image_uploader"] = uploader if uploader is not None else CloudinaryUploader.from_config()
    if not getattr(app.extensions["image_uploader"], "configured", True):
        app.logger.warning("[create_app] Cloudinary credentials missing; uploads will fail")

    from devevent.api import register_api
    register_api(app)

    return app
