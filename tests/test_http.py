# tests/test_http.py
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from jpevents.sources.http import TransportError, fetch_html, http_get


def _response(status: int = 200, text: str = "<html></html>", reason: str = "OK") -> MagicMock:
    r = MagicMock()
    r.url = "https://t.pia.jp/pia/events/music/"
    r.status_code = status
    r.text = text
    r.reason = reason
    return r


class TestHttpGet:
    def test_sends_browser_headers(self):
        with patch("jpevents.sources.http.requests.get", return_value=_response()) as get:
            res = http_get("https://t.pia.jp/pia/events/music/", timeout_s=5)

        assert res.status_code == 200
        _, kwargs = get.call_args
        assert kwargs["timeout"] == 5
        assert kwargs["headers"]["Accept-Language"] == "en-US,en;q=0.9,ja;q=0.8"
        assert "Chrome" in kwargs["headers"]["User-Agent"]


class TestFetchHtml:
    def test_returns_body(self):
        with patch("jpevents.sources.http.requests.get", return_value=_response(text="<p>ok</p>")):
            assert fetch_html("https://t.pia.jp/") == "<p>ok</p>"

    def test_non_2xx_raises(self):
        with patch("jpevents.sources.http.requests.get", return_value=_response(404, reason="Not Found")):
            with pytest.raises(TransportError) as exc:
                fetch_html("https://t.pia.jp/missing")

        assert exc.value.status_code == 404
        assert exc.value.url == "https://t.pia.jp/missing"
        assert str(exc.value) == "HTTP 404: Not Found"

    def test_network_error_is_wrapped(self):
        boom = requests.ConnectionError("connection refused")
        with patch("jpevents.sources.http.requests.get", side_effect=boom):
            with pytest.raises(TransportError) as exc:
                fetch_html("https://t.pia.jp/")

        assert exc.value.status_code is None
        assert "connection refused" in str(exc.value)
