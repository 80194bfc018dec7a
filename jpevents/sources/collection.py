from __future__ import annotations

from typing import Dict, List, Optional

from ..models import NormalizedEvent


class EventCollection:
    """
    Events gathered by one adapter run.

    Owns the records plus a URL index so de-duplication and the bilingual
    back-fill are lookups rather than scans. Skip counters are diagnostic only.
    """

    def __init__(self) -> None:
        self._events: List[NormalizedEvent] = []
        self._by_url: Dict[str, NormalizedEvent] = {}
        self._titles: set[str] = set()
        self._url_titles: set[tuple[str, str]] = set()
        self.errors: List[str] = []
        self.stats: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> List[NormalizedEvent]:
        return list(self._events)

    def add(self, ev: NormalizedEvent) -> NormalizedEvent:
        self._events.append(ev)
        self._by_url.setdefault(ev.source_url, ev)
        if ev.title_ja:
            self._titles.add(ev.title_ja)
            self._url_titles.add((ev.source_url, ev.title_ja))
        self.count("added")
        return ev

    def has_url(self, url: str) -> bool:
        return url in self._by_url

    def has_title(self, title: str) -> bool:
        return title in self._titles

    def has_url_and_title(self, url: str, title: str) -> bool:
        return (url, title) in self._url_titles

    def find_by_url(self, url: str) -> Optional[NormalizedEvent]:
        return self._by_url.get(url)

    def find(self, predicate) -> Optional[NormalizedEvent]:
        for ev in self._events:
            if predicate(ev):
                return ev
        return None

    def count(self, key: str, n: int = 1) -> None:
        self.stats[key] = self.stats.get(key, 0) + n

    def skip(self, reason: str) -> None:
        self.count(f"skipped_{reason}")
