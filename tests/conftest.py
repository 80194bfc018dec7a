# tests/conftest.py
from __future__ import annotations

from datetime import date
from typing import Dict, List

import pytest

from jpevents.sources.http import TransportError

# Fixed reference date for every adapter / normalizer test
TODAY = date(2025, 6, 1)


class FakeFetch:
    """url -> html map standing in for the network. Unknown URLs behave like a 404."""

    def __init__(self, pages: Dict[str, str]):
        self.pages = pages
        self.calls: List[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise TransportError(url, 404, "HTTP 404: Not Found")
        return self.pages[url]


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_adapter(sleeps):
    """make_adapter(AdapterClass, {url: html}) -> adapter wired to the fake fetcher."""
    def _make(cls, pages: Dict[str, str]):
        return cls(fetch=FakeFetch(pages), sleep=sleeps.append, today=TODAY)
    return _make
