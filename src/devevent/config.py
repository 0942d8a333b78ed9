# robust .env loading
import os
from pathlib import Path

from dotenv import load_dotenv

# 1) load from CWD (project root when you run commands there)
load_dotenv(override=False)
# 2) also try repo root even if code runs from src/
repo_root = Path(__file__).resolve().parents[2]
env_path = repo_root / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=True)

# --- Flask / server ---
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
FLASK_ENV = os.getenv("FLASK_ENV", "production")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- MongoDB ---
MONGODB_URI = os.getenv("MONGODB_URI")
MONGO_DB = os.getenv("MONGO_DB", "devevent")
EVENTS_COLLECTION = os.getenv("EVENTS_COLLECTION", "events")

# Attempts to re-derive a slug after the unique index rejects an insert
SLUG_MAX_RETRIES = int(os.getenv("SLUG_MAX_RETRIES", "5"))

# --- Cloudinary ---
# Either CLOUDINARY_URL=cloudinary://<key>:<secret>@<cloud> or the three parts below
CLOUDINARY_URL = os.getenv("CLOUDINARY_URL")
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
CLOUDINARY_API_BASE = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")
CLOUDINARY_TIMEOUT = float(os.getenv("CLOUDINARY_TIMEOUT", "30"))
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "devevent")
