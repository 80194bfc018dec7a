from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..config import HTTP_TIMEOUT_S

log = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,ja;q=0.8",
}


@dataclass
class HttpResult:
    url: str
    status_code: int
    text: str
    reason: str = ""


class TransportError(Exception):
    """A listing page could not be fetched (network failure or non-2xx)."""

    def __init__(self, url: str, status_code: Optional[int], message: str):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        return self.message


def http_get(url: str, *, timeout_s: int = HTTP_TIMEOUT_S) -> HttpResult:
    log.debug("[http] GET %s", url)
    r = requests.get(url, timeout=timeout_s, headers=DEFAULT_HEADERS)
    return HttpResult(url=r.url, status_code=r.status_code, text=r.text, reason=r.reason or "")


def fetch_html(url: str) -> str:
    """
    Body of a 2xx response. Anything else raises TransportError.
    No retries: a failed page is recorded by the caller and the run moves on.
    """
    try:
        res = http_get(url)
    except requests.RequestException as e:
        raise TransportError(url, None, str(e)) from e

    if not 200 <= res.status_code < 300:
        raise TransportError(url, res.status_code, f"HTTP {res.status_code}: {res.reason}".rstrip(": "))

    return res.text or ""
