from __future__ import annotations

import re
from typing import List, Optional

from bs4 import Tag

from ...normalize import PriceRange, clean_text, parse_date_range, parse_price_range
from ...tagging import detect_area, detect_category
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, image_src, link_href
from ..types import ListingPage

EVENT_SELECTORS = ("article.post", ".event-card", ".tc-event")
CALENDAR_SELECTORS = (".calendar-event", ".fc-event", "[data-event]")

TITLE_LINKS = "h2 a, h3 a, .event-title a, a.title, .entry-title a"

VENUE_PLACEHOLDER = "Various locations"
TAGS = ["budget-friendly"]

_FREE_RE = re.compile(r"\bfree\b", re.IGNORECASE)


def cheapo_price(text: str) -> PriceRange:
    """'Free' is a price here, not a missing one."""
    prices = parse_price_range(text)
    if prices.min is None and _FREE_RE.search(text or ""):
        return PriceRange(0, 0)
    return prices


class TokyoCheapoAdapter(BaseAdapter):
    name = "Tokyo Cheapo"
    base_url = "https://tokyocheapo.com"
    id_prefix = "tc"
    block_selectors = EVENT_SELECTORS

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(f"{self.base_url}/events/", EVENT_SELECTORS, {"kind": "events"}),
            ListingPage(f"{self.base_url}/calendar/", CALENDAR_SELECTORS, {"kind": "calendar"}),
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        if page.context.get("kind") == "calendar":
            self._parse_calendar_entry(block, events)
        else:
            self._parse_event_card(block, events)

    def _accept(self, title: str, link: Optional[str], events: EventCollection) -> Optional[str]:
        if self.is_junk(title) or not link:
            events.skip("no_title_or_link")
            return None
        full_url = self.url(link)
        if not full_url:
            events.skip("no_link")
            return None
        if events.has_url(full_url):
            events.skip("duplicate_url")
            return None
        return full_url

    def _parse_event_card(self, block: Tag, events: EventCollection) -> None:
        title_el = first(block, TITLE_LINKS)
        title = title_el.get_text(" ", strip=True) if title_el else ""
        full_url = self._accept(title, link_href(title_el), events)
        if not full_url:
            return

        date_text = all_text(block, ".event-date, .date, time, .meta-date")
        venue_text = all_text(block, ".event-venue, .venue, .location")
        description = all_text(block, ".excerpt, .event-excerpt, .entry-summary p")
        prices = cheapo_price(all_text(block, ".price, .event-price"))
        start, end = parse_date_range(date_text, self.today)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            title_en=title,
            description_ja=description or None,
            description_en=description or None,
            date_start=start or self.today_iso(),
            date_end=end,
            venue_name=venue_text or VENUE_PLACEHOLDER,
            area=detect_area(venue_text or title),
            category=detect_category(f"{title} {description}"),
            tags=TAGS,
            price_min=prices.min,
            price_max=prices.max,
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))

    def _parse_calendar_entry(self, block: Tag, events: EventCollection) -> None:
        title = clean_text(block.get_text(" ", strip=True)) or clean_text(block.get("title") or "")
        full_url = self._accept(title, link_href(block), events)
        if not full_url:
            return

        # Calendar chips carry no date or venue of their own
        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            title_en=title,
            date_start=self.today_iso(),
            venue_name="Tokyo",
            area="Tokyo",
            category=detect_category(title),
            tags=TAGS,
            source_url=full_url,
        ))
