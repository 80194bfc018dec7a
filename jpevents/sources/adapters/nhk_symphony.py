from __future__ import annotations

import re
from typing import List

from bs4 import Tag

from ...models import NormalizedEvent
from ...normalize import parse_date
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, first_text, link_href
from ..types import ListingPage

HALL_NAME = "NHKホール"
HALL_ADDRESS = "東京都渋谷区神南2-2-1"

# Seat prices are not on the listing; the hall's usual band
DEFAULT_PRICE_MIN = 5000
DEFAULT_PRICE_MAX = 15000

JA_SELECTORS = (".concert-item", ".schedule-item", "article", ".concert-list li", ".event-item")
EN_SELECTORS = (".concert-item", "article", ".event-item")

_NUMBER_RE = re.compile(r"\d+")


def titles_share_number(title_ja: str, title_en: str) -> bool:
    """Subscription concerts are numbered ('第2025回'), so a shared number pairs JA and EN titles."""
    ja_numbers = set(_NUMBER_RE.findall(title_ja or ""))
    return any(n in ja_numbers for n in _NUMBER_RE.findall(title_en or ""))


class NHKSymphonyAdapter(BaseAdapter):
    name = "NHK Symphony"
    base_url = "https://www.nhkso.or.jp"
    id_prefix = "nhkso"
    block_selectors = JA_SELECTORS
    min_title_length = 3

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(f"{self.base_url}/concert/", JA_SELECTORS, {"lang": "ja"}),
            ListingPage(f"{self.base_url}/en/concert/", EN_SELECTORS, {"lang": "en"}),
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        if page.context.get("lang") == "en":
            self._backfill_english(block, page, events)
            return

        title_el = first(block, "h2, h3, .title, .concert-title, a")
        title = title_el.get_text(" ", strip=True) if title_el else ""
        if self.is_junk(title):
            events.skip("junk_title")
            return

        # One concert page can list several programmes; URL + title is the key.
        full_url = self.url(link_href(title_el) or link_href(block)) or page.url
        if events.has_url_and_title(full_url, title):
            events.skip("duplicate")
            return

        date_text = all_text(block, ".date, .concert-date, time, .schedule-date")
        venue_text = all_text(block, ".venue, .hall, .place, .location")
        program_text = all_text(block, ".program, .description, .conductor, p")

        events.add(self.build_event(
            id=self.make_id(full_url + title),
            title_ja=title,
            description_ja=program_text or None,
            date_start=parse_date(date_text, self.today) or self.today_iso(),
            venue_name=venue_text or HALL_NAME,
            venue_address=HALL_ADDRESS,
            area="Tokyo",
            category="orchestra",
            tags=["classical", "orchestra", "symphony"],
            price_min=DEFAULT_PRICE_MIN,
            price_max=DEFAULT_PRICE_MAX,
            source_url=full_url,
        ))

    def _backfill_english(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        title = first_text(block, "h2, h3, .title")
        if not title:
            events.skip("en_no_title")
            return

        full_url = self.url(link_href(block)) or page.url

        def _matches(ev: NormalizedEvent) -> bool:
            return ev.source_url == full_url or titles_share_number(ev.title_ja, title)

        match = events.find(_matches)
        if match is None:
            events.skip("en_unmatched")
            return
        if not match.title_en:
            match.title_en = title
            events.count("en_backfilled")
