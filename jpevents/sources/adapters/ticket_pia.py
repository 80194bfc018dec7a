from __future__ import annotations

from typing import List

from bs4 import Tag

from ...normalize import parse_date, parse_price_range
from ...tagging import detect_area
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, image_src, link_href
from ..types import ListingPage

# (listing path, category) in crawl order
CATEGORY_PAGES = [
    ("/pia/events/music/", "concert"),
    ("/pia/events/classic/", "orchestra"),
    ("/pia/events/stage/", "theatre"),
    ("/pia/events/musical/", "musical"),
    ("/pia/events/rakugo/", "rakugo"),
    ("/pia/events/anime/", "anime"),
]

VENUE_PLACEHOLDER = "会場未定"


class TicketPiaAdapter(BaseAdapter):
    """
    Ticket Pia category listings.

    The category comes from the page, not from the text: a "classic" listing
    is tagged orchestra even if the card only shows a performer name.
    """

    name = "Ticket Pia"
    base_url = "https://t.pia.jp"
    id_prefix = "pia"
    page_delay_s = 0.5
    block_selectors = (
        ".event-list-item",
        ".eventCard",
        ".event-item",
        "article",
        ".search-result-item",
        "li[class*='event']",
    )

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(
                url=f"{self.base_url}{path}",
                selectors=self.block_selectors,
                context={"category": category},
            )
            for path, category in CATEGORY_PAGES
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        category = page.context["category"]

        title_el = first(block, "h2, h3, .event-title, .title, a[class*='title']")
        title = title_el.get_text(" ", strip=True) if title_el else ""
        if not title:
            anchor = block.find("a")
            title = anchor.get_text(" ", strip=True) if anchor else ""
        if self.is_junk(title):
            events.skip("junk_title")
            return

        link = link_href(title_el) or link_href(block)
        full_url = self.url(link)
        if not full_url:
            events.skip("no_link")
            return

        if events.has_url(full_url):
            events.skip("duplicate_url")
            return

        date_text = all_text(block, ".date, .event-date, .schedule, time")
        venue_text = all_text(block, ".venue, .place, .location, .hall")
        price_text = all_text(block, ".price, .ticket-price")

        prices = parse_price_range(price_text)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            date_start=parse_date(date_text, self.today) or self.today_iso(),
            venue_name=venue_text or VENUE_PLACEHOLDER,
            area=detect_area(venue_text or title),
            category=category,
            tags=[category, "tickets-available"],
            price_min=prices.min,
            price_max=prices.max,
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))
