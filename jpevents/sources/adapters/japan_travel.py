from __future__ import annotations

from typing import List

from bs4 import Tag

from ...normalize import parse_date_range
from ...tagging import detect_area, detect_category
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, first_text, image_src, link_href
from ..types import ListingPage

REGIONS = ("tokyo", "osaka", "kyoto")

MAIN_SELECTORS = (".event-card", ".article-card", "article[class*='event']", ".listing-item")
REGION_SELECTORS = (".event-card", ".article-card", "article", ".listing-item")

TAGS = ["tourist-friendly", "english-info"]


class JapanTravelAdapter(BaseAdapter):
    """
    English-language tourist listings.

    Titles are already English, so they double as title_en. Region pages
    fix the area to the region instead of guessing it from text.
    """

    name = "Japan Travel"
    base_url = "https://en.japantravel.com"
    id_prefix = "jt"
    block_selectors = MAIN_SELECTORS

    def listing_pages(self) -> List[ListingPage]:
        pages = [ListingPage(f"{self.base_url}/events", MAIN_SELECTORS, {"region": None})]
        for region in REGIONS:
            pages.append(ListingPage(
                f"{self.base_url}/{region}/events",
                REGION_SELECTORS,
                {"region": region.capitalize()},
            ))
        return pages

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        region = page.context.get("region")

        title_el = first(block, "h2, h3, .title" if region else "h2, h3, .title, .card-title")
        title = title_el.get_text(" ", strip=True) if title_el else ""
        link = link_href(title_el) or link_href(block)
        if self.is_junk(title) or not link:
            events.skip("no_title_or_link")
            return

        full_url = self.url(link)
        if not full_url:
            events.skip("no_link")
            return
        if events.has_url(full_url):
            events.skip("duplicate_url")
            return

        if region:
            date_text = all_text(block, ".date, time")
            description = first_text(block, ".description, .excerpt, p")
            area = region
            venue = region
        else:
            date_text = all_text(block, ".date, .event-date, time, .meta-info")
            description = first_text(block, ".description, .excerpt, .summary, p")
            location = all_text(block, ".location, .venue, .place, .region")
            area = detect_area(location or title)
            venue = location or area

        start, end = parse_date_range(date_text, self.today)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            title_en=title,
            description_ja=description or None,
            description_en=description or None,
            date_start=start or self.today_iso(),
            date_end=end,
            venue_name=venue,
            area=area,
            category=detect_category(f"{title} {description}"),
            tags=TAGS,
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))
