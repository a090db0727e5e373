from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from titans.config import get_optional
from titans.dropbox_api import ensure_folder, get_access_token, get_shared_link, upload_file

logger = logging.getLogger(__name__)


class ObjectStore:
    """Bucketed object storage addressed by generated file names."""

    def upload(self, bucket: str, name: str, content: bytes, content_type: str = "") -> str:
        """Store `content` under bucket/name and return the stored object name."""
        raise NotImplementedError

    def public_url(self, bucket: str, name: str) -> str:
        raise NotImplementedError


class LocalObjectStore(ObjectStore):
    """
    Writes into Streamlit's static folder. With `server.enableStaticServing`
    on, files under ./static are served at /app/static/...
    """

    def __init__(self, root: Path = Path("static"), url_prefix: str = "/app/static"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def upload(self, bucket: str, name: str, content: bytes, content_type: str = "") -> str:
        folder = self.root / bucket
        folder.mkdir(parents=True, exist_ok=True)
        target = folder / name
        if target.exists():
            raise RuntimeError(f"Object already exists: {bucket}/{name}")
        target.write_bytes(content)
        logger.info("Stored %s/%s locally (%d bytes)", bucket, name, len(content))
        return name

    def public_url(self, bucket: str, name: str) -> str:
        return f"{self.url_prefix}/{bucket}/{name}"


class DropboxObjectStore(ObjectStore):
    """Buckets are folders under `root` in the club's Dropbox app folder."""

    def __init__(self, app_key: str, app_secret: str, refresh_token: str, root: str = "/titans"):
        self.app_key = app_key
        self.app_secret = app_secret
        self.refresh_token = refresh_token
        self.root = "/" + root.strip("/")

    def _token(self) -> str:
        return get_access_token(self.app_key, self.app_secret, self.refresh_token)

    def _path(self, bucket: str, name: str) -> str:
        return posixpath.join(self.root, bucket, name)

    def upload(self, bucket: str, name: str, content: bytes, content_type: str = "") -> str:
        access_token = self._token()
        ensure_folder(access_token, posixpath.join(self.root, bucket))
        meta = upload_file(access_token, self._path(bucket, name), content)
        logger.info("Uploaded %s to Dropbox", meta.get("path_display") or self._path(bucket, name))
        return meta.get("name") or name

    def public_url(self, bucket: str, name: str) -> str:
        return get_shared_link(self._token(), self._path(bucket, name))


def build_object_store() -> ObjectStore:
    """Dropbox when its secrets are configured, otherwise the local static folder."""
    app_key = get_optional("DROPBOX_APP_KEY")
    app_secret = get_optional("DROPBOX_APP_SECRET")
    refresh_token = get_optional("DROPBOX_REFRESH_TOKEN")
    if app_key and app_secret and refresh_token:
        return DropboxObjectStore(
            app_key, app_secret, refresh_token, root=get_optional("DROPBOX_ROOT", "/titans")
        )
    logger.warning("Dropbox secrets not configured; storing uploads under ./static")
    return LocalObjectStore()

