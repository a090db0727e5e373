from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Callable, Optional

from titans.storage import ObjectStore

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def random_token(length: int = 10) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_object_name(original_name: str, now_ms: Optional[int] = None) -> str:
    """
    `<random>-<epoch millis>.<original extension>`.
    Collisions are not retried; 36**10 tokens per millisecond is plenty.
    """
    ms = int(time.time() * 1000) if now_ms is None else now_ms
    base = f"{random_token()}-{ms}"
    name = original_name or ""
    if "." in name:
        return f"{base}.{name.rsplit('.', 1)[-1].lower()}"
    return base


def is_image(mime_type: Optional[str]) -> bool:
    return (mime_type or "").lower().startswith("image/")


class ImageUpload:
    """
    One-image upload widget: picker or drag-and-drop hands a file to
    `upload()`, which stores it and reports the public URL to the caller.

    `file` is anything with `name`, `type` and `getvalue()`, which is what
    st.file_uploader returns.
    """

    def __init__(
        self,
        store: ObjectStore,
        bucket: str,
        current_image: Optional[str] = None,
        on_image_uploaded: Optional[Callable[[Optional[str]], None]] = None,
    ):
        self.store = store
        self.bucket = bucket
        self.preview = current_image or None
        self.on_image_uploaded = on_image_uploaded or (lambda url: None)
        self.uploading = False
        self.alert: Optional[str] = None
        self._handled: Optional[tuple] = None

    def upload(self, file) -> Optional[str]:
        if file is None:
            return None
        self.alert = None

        if not is_image(getattr(file, "type", "")):
            self.alert = "Please upload an image file"
            return None

        self.uploading = True
        try:
            name = generate_object_name(file.name)
            stored = self.store.upload(self.bucket, name, file.getvalue(), content_type=file.type)
            url = self.store.public_url(self.bucket, stored)
            if not url:
                raise RuntimeError("Storage returned an empty public URL.")
        except Exception as e:
            logger.error("Image upload to %s failed: %s", self.bucket, e)
            self.alert = f"Error uploading image: {e}"
            return None
        finally:
            self.uploading = False

        self.preview = url
        self.on_image_uploaded(url)
        return url

    def accept(self, file) -> Optional[str]:
        """
        Upload `file` unless it is the one already handled. The uploader keeps
        handing back the same file on every rerun; a failed attempt is
        forgotten so picking the same file again retries.
        """
        if file is None:
            return None
        marker = (file.name, getattr(file, "size", None))
        if marker == self._handled:
            return None
        self._handled = marker
        url = self.upload(file)
        if url is None:
            self._handled = None
        return url

    def remove(self) -> None:
        self.preview = None
        self.on_image_uploaded(None)
