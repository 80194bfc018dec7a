from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4 import Tag

from ..junk_titles import is_junk_title
from ..models import NormalizedEvent, SourceOutcome
from ..normalize import local_today, make_event_id, resolve_url, today_iso
from .collection import EventCollection
from .http import fetch_html
from .markup import parse_html, select_blocks
from .types import ListingPage

log = logging.getLogger(__name__)


def source_key(name: str) -> str:
    """'Ticket Pia' -> 'ticket-pia'"""
    return "-".join(name.lower().split())


class BaseAdapter(ABC):
    """
    One listing source.

    Subclasses describe WHERE to look (listing_pages, block_selectors) and
    HOW to read one block (parse_block). The fetch / select / isolate loop
    lives here, so a broken block or page never takes the source down.
    """

    name: str = ""
    base_url: str = ""
    id_prefix: str = ""
    block_selectors: Tuple[str, ...] = ()
    page_delay_s: float = 0.0
    min_title_length: int = 2

    def __init__(
        self,
        *,
        fetch: Callable[[str], str] = fetch_html,
        sleep: Callable[[float], None] = time.sleep,
        today: Optional[date] = None,
    ):
        self._fetch = fetch
        self._sleep = sleep
        self._today = today

    @property
    def key(self) -> str:
        return source_key(self.name)

    @property
    def today(self) -> date:
        return local_today(self._today)

    # ------------------------------------------------------------
    # Source description
    # ------------------------------------------------------------

    def listing_pages(self) -> List[ListingPage]:
        """Default: the base URL with the class-level selector chain."""
        return [ListingPage(url=self.base_url, selectors=self.block_selectors)]

    @abstractmethod
    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        """Read one candidate block; add at most what it describes to events."""

    # ------------------------------------------------------------
    # Shared helpers for parse_block implementations
    # ------------------------------------------------------------

    def url(self, link: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
        return resolve_url(link, base_url or self.base_url)

    def make_id(self, unique: str, prefix: Optional[str] = None) -> str:
        return make_event_id(prefix or self.id_prefix, unique)

    def is_junk(self, title: Optional[str]) -> bool:
        return is_junk_title(title, min_length=self.min_title_length)

    def today_iso(self) -> str:
        return today_iso(self.today)

    def build_event(self, **fields: Any) -> NormalizedEvent:
        fields.setdefault("source_name", self.name)
        return NormalizedEvent(**fields)

    # ------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------

    def run(self) -> SourceOutcome:
        t0 = time.perf_counter()
        events = EventCollection()

        for page in self.listing_pages():
            try:
                html = self._fetch(page.url)
                soup = parse_html(html)
                blocks = select_blocks(soup, page.selectors or self.block_selectors)
            except Exception as e:
                log.warning("[%s] page failed: %s (%s)", self.key, page.url, e)
                events.errors.append(f"{page.url}: {e}")
                events.count("page_failed")
                continue

            log.info("[%s] %s blocks=%d", self.key, page.url, len(blocks))
            events.count("blocks_seen", len(blocks))

            for block in blocks:
                try:
                    self.parse_block(block, page, events)
                except Exception as e:
                    log.warning("[%s] block failed on %s: %s", self.key, page.url, e)
                    events.count("block_failed")

            if self.page_delay_s > 0:
                self._sleep(self.page_delay_s)

        duration_ms = int((time.perf_counter() - t0) * 1000)
        stats: Dict[str, int] = dict(events.stats)
        log.info(
            "[%s] done events=%d errors=%d duration_ms=%d stats=%s",
            self.key, len(events), len(events.errors), duration_ms, stats,
        )
        return SourceOutcome(
            source=self.name,
            key=self.key,
            events=events.events,
            errors=list(events.errors),
            duration_ms=duration_ms,
            stats=stats,
        )

    def extract(self) -> List[NormalizedEvent]:
        return self.run().events
