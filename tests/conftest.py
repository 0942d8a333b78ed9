import io
import os
import pytest

# Keep DB out of unit tests unless explicitly needed
os.environ.setdefault("MONGODB_URI", "")
os.environ.setdefault("MONGO_DB", "devevent_test")
os.environ.setdefault("FLASK_ENV", "testing")

from mongomock import MongoClient as MockClient  # noqa: E402
import requests  # noqa: E402

from devevent import create_app  # noqa: E402
import devevent.config as cfg  # noqa: E402
import devevent.db.mongo as mongo_mod  # noqa: E402
from devevent.db.events import EventStore  # noqa: E402


class _DummyResp:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeUploader:
    configured = True

    def __init__(self, url="https://res.cloudinary.com/demo/image/upload/devevent/cover.png", error=None):
        self.url = url
        self.error = error
        self.calls = []

    def upload(self, data, filename="upload", content_type=None):
        self.calls.append({"data": data, "filename": filename, "content_type": content_type})
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture(scope="session")
def mock_db():
    client = MockClient()
    return client["devevent_test"]


@pytest.fixture(autouse=True)
def _patch_db(monkeypatch, mock_db):
    monkeypatch.setattr(mongo_mod, "get_db", lambda: mock_db, raising=True)
    monkeypatch.setattr(mongo_mod, "get_collection", lambda name: mock_db[name], raising=True)
    mongo_mod.ensure_indexes()
    yield
    for name in list(mock_db.list_collection_names()):
        mock_db[name].delete_many({})


@pytest.fixture(autouse=True)
def _patch_cfg(monkeypatch):
    monkeypatch.setattr(cfg, "FLASK_ENV", "testing", raising=False)
    monkeypatch.setattr(cfg, "MONGO_DB", "devevent_test", raising=False)
    monkeypatch.setattr(cfg, "SLUG_MAX_RETRIES", 5, raising=False)
    yield


@pytest.fixture
def events_coll(mock_db):
    return mock_db[cfg.EVENTS_COLLECTION]


@pytest.fixture
def store():
    return EventStore()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def app_client(uploader):
    app = create_app(testing=True, uploader=uploader)
    with app.test_client() as c:
        yield c


@pytest.fixture
def event_fields():
    def make(**overrides):
        fields = {
            "title": "  PyCon Meetup 2025  ",
            "description": "An evening of talks about Python.",
            "overview": "Lightning talks and networking.",
            "image": "https://res.cloudinary.com/demo/image/upload/devevent/cover.png",
            "venue": "Main Hall",
            "location": "Berlin, Germany",
            "date": "2025-11-05",
            "time": "6:30 PM",
            "mode": "hybrid",
            "audience": "Developers",
            "agenda": ["Doors open", "Talks", "Networking"],
            "organizer": "Python Berlin",
            "tags": ["python", "meetup"],
        }
        fields.update(overrides)
        return fields

    return make


@pytest.fixture
def form_data(event_fields):
    def make(image=True, **overrides):
        fields = event_fields(**overrides)
        fields.pop("image", None)
        data = {k: v for k, v in fields.items() if v is not None}
        if image:
            data["image"] = (io.BytesIO(b"\x89PNG fake bytes"), "cover.png", "image/png")
        return data

    return make


@pytest.fixture
def fake_requests(monkeypatch):
    calls = []

    def install(mapper):
        def _post(url, data=None, files=None, timeout=None, **kwargs):
            calls.append({"url": url, "data": data, "files": files, "timeout": timeout})
            if callable(mapper):
                payload, status = mapper(url, data, files)
            else:
                payload, status = mapper.get(url, ({}, 200))
            return _DummyResp(status_code=status, payload=payload)

        monkeypatch.setattr("requests.post", _post, raising=True)
        return calls

    return install
