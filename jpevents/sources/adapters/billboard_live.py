from __future__ import annotations

from typing import List

from bs4 import Tag

from ...normalize import is_primarily_latin, parse_date, parse_price_range
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, image_src, link_href
from ..types import ListingPage

# (path, venue name, area, address)
VENUES = [
    ("/tokyo/", "Billboard Live Tokyo", "Tokyo", "東京都港区赤坂9-7-4"),
    ("/osaka/", "Billboard Live Osaka", "Osaka", "大阪市北区梅田2-2-22"),
    ("/yokohama/", "Billboard Live Yokohama", "Yokohama", "横浜市西区みなとみらい4-3-1"),
]

# Anything outside the club's ticket band is a date, a seat count or a phone number
PRICE_FLOOR = 1000
PRICE_CEILING = 50000


class BillboardLiveAdapter(BaseAdapter):
    name = "Billboard Live"
    base_url = "https://www.billboard-live.com"
    id_prefix = "billboard"
    page_delay_s = 0.3
    block_selectors = (
        ".schedule-item",
        ".live-item",
        ".event-card",
        "article",
        ".performance",
        "li.live",
    )

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(
                url=f"{self.base_url}{path}schedule/",
                selectors=self.block_selectors,
                context={"venue": venue, "area": area, "address": address},
            )
            for path, venue, area, address in VENUES
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        title_el = first(block, "h2, h3, .artist-name, .title, .live-title a")
        title = title_el.get_text(" ", strip=True) if title_el else ""
        if not title:
            anchor = block.find("a")
            title = anchor.get_text(" ", strip=True) if anchor else ""
        if self.is_junk(title):
            events.skip("junk_title")
            return

        full_url = self.url(link_href(title_el) or link_href(block)) or page.url
        if events.has_url(full_url):
            events.skip("duplicate_url")
            return

        date_text = all_text(block, ".date, .live-date, time, .schedule-date")
        time_text = all_text(block, ".time, .show-time, .open-start")
        price_text = all_text(block, ".price, .ticket-price, .charge")

        prices = parse_price_range(price_text, floor=PRICE_FLOOR, ceiling=PRICE_CEILING)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            title_en=title if is_primarily_latin(title) else None,
            description_ja=f"開場/開演: {time_text}" if time_text else None,
            date_start=parse_date(date_text, self.today) or self.today_iso(),
            venue_name=page.context["venue"],
            venue_address=page.context["address"],
            area=page.context["area"],
            category="concert",
            tags=["live", "music", "jazz", "pop"],
            price_min=prices.min,
            price_max=prices.max,
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))
