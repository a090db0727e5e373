from __future__ import annotations

# Dropbox API helpers used by the object store for image uploads and public links.

import json
import logging

import requests

logger = logging.getLogger(__name__)

TOKEN_URL = "https://api.dropboxapi.com/oauth2/token"
UPLOAD_URL = "https://content.dropboxapi.com/2/files/upload"
CREATE_FOLDER_URL = "https://api.dropboxapi.com/2/files/create_folder_v2"
SHARED_LINK_URL = "https://api.dropboxapi.com/2/sharing/create_shared_link_with_settings"
LIST_SHARED_LINKS_URL = "https://api.dropboxapi.com/2/sharing/list_shared_links"


def get_access_token(app_key: str, app_secret: str, refresh_token: str, timeout_s: int = 30) -> str:
    data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": app_key,
        "client_secret": app_secret,
    }
    r = requests.post(TOKEN_URL, data=data, timeout=timeout_s)
    if not r.ok:
        raise RuntimeError(f"Dropbox token error {r.status_code}: {r.text}")
    token = r.json().get("access_token")
    if not token:
        raise RuntimeError("Dropbox token response missing access_token.")
    return token


def _json_headers(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"}


def ensure_folder(access_token: str, dropbox_folder_path: str, timeout_s: int = 30) -> None:
    """
    Create a folder if it doesn't exist. Safe to call repeatedly.
    """
    payload = {"path": dropbox_folder_path, "autorename": False}
    r = requests.post(CREATE_FOLDER_URL, headers=_json_headers(access_token), json=payload, timeout=timeout_s)

    # 409 = folder already exists
    if r.status_code == 409:
        return
    if not r.ok:
        raise RuntimeError(f"Dropbox create_folder error {r.status_code}: {r.text}")


def upload_file(
    access_token: str,
    dropbox_path: str,
    content_bytes: bytes,
    *,
    mode: str = "add",
    autorename: bool = False,
    timeout_s: int = 120,
) -> dict:
    """
    Upload bytes to `dropbox_path`. Returns the Dropbox file metadata.
    Generated image names are unique, so the default is add-without-rename.
    """
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/octet-stream",
        "Dropbox-API-Arg": json.dumps(
            {
                "path": dropbox_path,
                "mode": mode,
                "autorename": autorename,
                "mute": True,
                "strict_conflict": False,
            }
        ),
    }
    r = requests.post(UPLOAD_URL, headers=headers, data=content_bytes, timeout=timeout_s)
    if not r.ok:
        raise RuntimeError(f"Dropbox upload error {r.status_code}: {r.text}")
    return r.json()


def to_raw_link(shared_url: str) -> str:
    """Turn a Dropbox share page link into a direct-render link usable in <img>."""
    if "dl=0" in shared_url:
        return shared_url.replace("dl=0", "raw=1")
    if "dl=1" in shared_url:
        return shared_url.replace("dl=1", "raw=1")
    sep = "&" if "?" in shared_url else "?"
    return f"{shared_url}{sep}raw=1"


def get_shared_link(access_token: str, dropbox_path: str, timeout_s: int = 30) -> str:
    """
    Return a public (raw) link for a file, creating the shared link if needed.
    """
    payload = {"path": dropbox_path, "settings": {"requested_visibility": "public"}}
    r = requests.post(SHARED_LINK_URL, headers=_json_headers(access_token), json=payload, timeout=timeout_s)

    if r.status_code == 409:
        # shared_link_already_exists: look the existing link up instead.
        logger.debug("Shared link already exists for %s", dropbox_path)
        r = requests.post(
            LIST_SHARED_LINKS_URL,
            headers=_json_headers(access_token),
            json={"path": dropbox_path, "direct_only": True},
            timeout=timeout_s,
        )
        if not r.ok:
            raise RuntimeError(f"Dropbox list_shared_links error {r.status_code}: {r.text}")
        links = r.json().get("links") or []
        if not links:
            raise RuntimeError("Dropbox list_shared_links returned no link.")
        return to_raw_link(links[0]["url"])

    if not r.ok:
        raise RuntimeError(f"Dropbox create_shared_link error {r.status_code}: {r.text}")

    url = r.json().get("url")
    if not url:
        raise RuntimeError("Dropbox create_shared_link returned no url.")
    return to_raw_link(url)
