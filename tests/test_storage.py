"""
Tests for object storage and the Dropbox helpers, with requests mocked.
"""

from unittest.mock import MagicMock, patch

import pytest

from titans import dropbox_api
from titans.storage import DropboxObjectStore, LocalObjectStore, build_object_store


def _resp(status=200, payload=None, text=""):
    r = MagicMock()
    r.status_code = status
    r.ok = 200 <= status < 300
    r.json.return_value = payload or {}
    r.text = text
    return r


class TestToRawLink:
    def test_dl0(self):
        assert dropbox_api.to_raw_link("https://www.dropbox.com/s/abc/x.png?dl=0") == (
            "https://www.dropbox.com/s/abc/x.png?raw=1"
        )

    def test_existing_query(self):
        assert dropbox_api.to_raw_link("https://www.dropbox.com/scl/fi/x.png?rlkey=k&dl=1") == (
            "https://www.dropbox.com/scl/fi/x.png?rlkey=k&raw=1"
        )

    def test_no_query(self):
        assert dropbox_api.to_raw_link("https://www.dropbox.com/s/abc/x.png") == (
            "https://www.dropbox.com/s/abc/x.png?raw=1"
        )


class TestDropboxHelpers:
    @patch("titans.dropbox_api.requests.post")
    def test_token_error(self, mock_post):
        mock_post.return_value = _resp(400, text="invalid_grant")
        with pytest.raises(RuntimeError, match="Dropbox token error 400: invalid_grant"):
            dropbox_api.get_access_token("k", "s", "r")

    @patch("titans.dropbox_api.requests.post")
    def test_folder_exists_is_ok(self, mock_post):
        mock_post.return_value = _resp(409)
        dropbox_api.ensure_folder("tok", "/titans/team-logos")

    @patch("titans.dropbox_api.requests.post")
    def test_shared_link_already_exists(self, mock_post):
        mock_post.side_effect = [
            _resp(409),
            _resp(200, {"links": [{"url": "https://www.dropbox.com/s/abc/x.png?dl=0"}]}),
        ]

        url = dropbox_api.get_shared_link("tok", "/titans/team-logos/x.png")

        assert url == "https://www.dropbox.com/s/abc/x.png?raw=1"
        assert mock_post.call_args_list[1].args[0] == dropbox_api.LIST_SHARED_LINKS_URL


class TestDropboxObjectStore:
    @patch("titans.dropbox_api.requests.post")
    def test_upload_and_url(self, mock_post):
        mock_post.side_effect = [
            _resp(200, {"access_token": "tok"}),
            _resp(409),
            _resp(200, {"name": "abc-1.png", "path_display": "/titans/team-logos/abc-1.png"}),
            _resp(200, {"access_token": "tok"}),
            _resp(200, {"url": "https://www.dropbox.com/s/abc/abc-1.png?dl=0"}),
        ]
        store = DropboxObjectStore("k", "s", "r", root="titans/")

        name = store.upload("team-logos", "abc-1.png", b"img")
        url = store.public_url("team-logos", name)

        assert name == "abc-1.png"
        assert url == "https://www.dropbox.com/s/abc/abc-1.png?raw=1"
        upload_call = mock_post.call_args_list[2]
        assert upload_call.args[0] == dropbox_api.UPLOAD_URL
        assert '"/titans/team-logos/abc-1.png"' in upload_call.kwargs["headers"]["Dropbox-API-Arg"]


class TestLocalObjectStore:
    def test_refuses_overwrite(self, tmp_path):
        store = LocalObjectStore(root=tmp_path)
        store.upload("player-photos", "a.png", b"1")

        with pytest.raises(RuntimeError, match="already exists"):
            store.upload("player-photos", "a.png", b"2")

    def test_public_url(self, tmp_path):
        store = LocalObjectStore(root=tmp_path, url_prefix="/app/static/")
        assert store.public_url("player-photos", "a.png") == "/app/static/player-photos/a.png"


class TestBuildObjectStore:
    def test_dropbox_when_configured(self, monkeypatch):
        monkeypatch.setenv("DROPBOX_APP_KEY", "k")
        monkeypatch.setenv("DROPBOX_APP_SECRET", "s")
        monkeypatch.setenv("DROPBOX_REFRESH_TOKEN", "r")
        assert isinstance(build_object_store(), DropboxObjectStore)

    def test_local_fallback(self, monkeypatch):
        for key in ("DROPBOX_APP_KEY", "DROPBOX_APP_SECRET", "DROPBOX_REFRESH_TOKEN"):
            monkeypatch.delenv(key, raising=False)
        assert isinstance(build_object_store(), LocalObjectStore)
