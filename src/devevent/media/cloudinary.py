# devevent/media/cloudinary.py
from __future__ import annotations

import hashlib
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from devevent import config
from devevent.errors import UploadFailure

logger = logging.getLogger(__name__)


def _sign(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary signature: sha1 of the sorted `k=v&...` string followed by the secret."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def _parse_cloudinary_url(url: str) -> Dict[str, Optional[str]]:
    """cloudinary://<api_key>:<api_secret>@<cloud_name>"""
    parsed = urlparse(url)
    if parsed.scheme != "cloudinary":
        raise ValueError(f"not a cloudinary:// URL: {url!r}")
    return {
        "cloud_name": parsed.hostname,
        "api_key": parsed.username,
        "api_secret": parsed.password,
    }


class CloudinaryUploader:
    """Signed image uploads to a fixed Cloudinary folder."""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "devevent",
        api_base: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.api_base = api_base
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> "CloudinaryUploader":
        creds: Dict[str, Optional[str]] = {
            "cloud_name": config.CLOUDINARY_CLOUD_NAME,
            "api_key": config.CLOUDINARY_API_KEY,
            "api_secret": config.CLOUDINARY_API_SECRET,
        }
        if config.CLOUDINARY_URL:
            try:
                creds.update({k: v for k, v in _parse_cloudinary_url(config.CLOUDINARY_URL).items() if v})
            except ValueError as e:
                logger.warning("ignoring CLOUDINARY_URL: %s", e)
        return cls(
            folder=config.UPLOAD_FOLDER,
            api_base=config.CLOUDINARY_API_BASE,
            timeout=config.CLOUDINARY_TIMEOUT,
            **creds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _upload_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.cloud_name}/image/upload"

    def upload(self, data: bytes, filename: str = "upload", content_type: Optional[str] = None) -> str:
        """Upload image bytes and return the public `secure_url`."""
        if not self.configured:
            raise UploadFailure("Cloudinary credentials are not configured")

        params: Dict[str, Any] = {"folder": self.folder, "timestamp": int(time.time())}
        payload = dict(params, api_key=self.api_key, signature=_sign(params, self.api_secret))
        files = {"file": (filename or "upload", data, content_type or "application/octet-stream")}

        url = self._upload_url()
        logger.info("uploading %s (%d bytes) to %s", filename, len(data), url)
        try:
            r = requests.post(url, data=payload, files=files, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("image upload failed: %s", e)
            raise UploadFailure(f"image upload failed: {e}") from e

        try:
            body = r.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            # proxies and gateways can answer with non-object JSON
            body = {}

        if r.status_code >= 400 or "error" in body:
            err = body.get("error")
            detail = err.get("message") if isinstance(err, dict) else (err or f"HTTP {r.status_code}")
            logger.error("image upload rejected: %s", detail)
            raise UploadFailure(f"image upload rejected: {detail}")

        secure_url = body.get("secure_url")
        if not secure_url:
            raise UploadFailure("image upload response has no secure_url")
        return secure_url
