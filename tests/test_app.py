"""Tests for the /api/unfurl endpoint."""

import importlib
from unittest.mock import patch

import pytest

from app import app as flask_app
from unfurl import UnfurlResult


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as client:
        yield client


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.data == b"ok"


@pytest.mark.parametrize("query", ["", "?url=", "?url=%20%20"])
def test_missing_url(client, query):
    resp = client.get(f"/api/unfurl{query}")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "missing url"}
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"


@pytest.mark.parametrize(
    "url,message",
    [
        ("ftp://example.com", "invalid protocol"),
        ("http://localhost/", "blocked host"),
        ("http://192.168.1.1/", "blocked ip"),
        ("nonsense", "invalid url"),
    ],
)
def test_rejected_target(client, url, message):
    with patch("requests.Session.get") as page_get:
        resp = client.get("/api/unfurl", query_string={"url": url})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": message}
    page_get.assert_not_called()


def test_success(client):
    result = UnfurlResult(url="https://example.com/post", title="Hello", image="https://example.com/img.png")
    with patch("app.unfurl", return_value=result) as mock_unfurl:
        resp = client.get("/api/unfurl", query_string={"url": " https://example.com/post "})

    mock_unfurl.assert_called_once_with("https://example.com/post")
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    assert resp.get_json() == {
        "data": {
            "url": "https://example.com/post",
            "title": "Hello",
            "description": "",
            "image": "https://example.com/img.png",
            "site_name": "",
        }
    }


def test_unexpected_error(client):
    with patch("app.unfurl", side_effect=RuntimeError("kaboom")):
        resp = client.get("/api/unfurl", query_string={"url": "https://example.com/"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "unfurl error"}


@pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("0", False), (None, False)])
def test_debug_comes_from_env(monkeypatch, value, expected):
    import app as app_module

    if value is None:
        monkeypatch.delenv("FLASK_DEBUG", raising=False)
    else:
        monkeypatch.setenv("FLASK_DEBUG", value)
    importlib.reload(app_module)
    assert app_module.DEBUG is expected
