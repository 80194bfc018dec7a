from __future__ import annotations

from typing import List

from bs4 import Tag

from ...normalize import parse_date_range
from ...tagging import detect_area
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, first_text, image_src, link_href
from ..types import ListingPage

VENUE_PLACEHOLDER = "Gallery"
TAGS = ["art", "exhibition", "museum"]


class TokyoArtBeatAdapter(BaseAdapter):
    """
    Exhibition listings in two languages.

    The Japanese page is read first and creates the records; the English page
    only fills title_en / description_en on records it can find by URL, so an
    exhibition listed on both pages ends up as ONE record with both titles.
    Exhibitions that only exist on the English page are added as new records.
    """

    name = "Tokyo Art Beat"
    base_url = "https://www.tokyoartbeat.com"
    id_prefix = "tab"
    page_delay_s = 0.3
    block_selectors = (".event-card", ".exhibition-card", "article", ".listing-item", ".event-item")

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(f"{self.base_url}/events", self.block_selectors, {"lang": "ja"}),
            ListingPage(f"{self.base_url}/en/events", self.block_selectors, {"lang": "en"}),
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        is_english = page.context.get("lang") == "en"

        title_el = first(block, "h2, h3, .title, .event-title")
        title = title_el.get_text(" ", strip=True) if title_el else ""
        link = link_href(title_el) or link_href(block)
        if self.is_junk(title) or not link:
            events.skip("no_title_or_link")
            return

        full_url = self.url(link)
        if not full_url:
            events.skip("no_link")
            return

        description = first_text(block, ".description, .excerpt, p")

        existing = events.find_by_url(full_url)
        if existing is not None:
            if is_english:
                if not existing.title_en:
                    existing.title_en = title
                    events.count("en_backfilled")
                if description and not existing.description_en:
                    existing.description_en = description
            else:
                events.skip("duplicate_url")
            return

        if events.find(lambda ev: title in (ev.title_ja, ev.title_en)):
            events.skip("duplicate_title")
            return

        date_text = all_text(block, ".date, .period, time, .event-date")
        venue_text = all_text(block, ".venue, .location, .gallery, .museum")
        start, end = parse_date_range(date_text, self.today)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            title_en=title if is_english else None,
            description_ja=None if is_english else (description or None),
            description_en=(description or None) if is_english else None,
            date_start=start or self.today_iso(),
            date_end=end,
            venue_name=venue_text or VENUE_PLACEHOLDER,
            area=detect_area(venue_text or title),
            category="art",
            tags=TAGS,
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))
