from __future__ import annotations

from typing import List, Optional

from bs4 import Tag

from ...normalize import parse_date_range, parse_price_range
from ...tagging import detect_area
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first_text, image_src, link_href
from ..types import ListingPage

# Kabuki houses -> city. Checked before generic area detection since most
# theatre names carry no city keyword.
THEATRE_AREAS = {
    "歌舞伎座": "Tokyo",
    "新橋演舞場": "Tokyo",
    "国立劇場": "Tokyo",
    "明治座": "Tokyo",
    "浅草公会堂": "Tokyo",
    "南座": "Kyoto",
    "松竹座": "Osaka",
    "御園座": "Nagoya",
    "博多座": "Fukuoka",
}

VENUE_PLACEHOLDER = "歌舞伎座"
TAGS = ["traditional", "kabuki", "theatre"]

THEATERS_SELECTORS = (".theater-section", ".performance-list", "article", ".kouen-item", ".play-item")
SCHEDULE_SELECTORS = (".schedule-item", ".calendar-event", "tr", ".performance")


def detect_kabuki_area(venue_text: Optional[str]) -> str:
    text = venue_text or ""
    for theatre, area in THEATRE_AREAS.items():
        if theatre in text:
            return area
    return detect_area(text)


class KabukiBitoAdapter(BaseAdapter):
    """
    Kabuki performance runs: the per-theatre page first, then the schedule
    table. Schedule rows can repeat a run already seen on the theatre page
    and are dropped by title.
    """

    name = "Kabuki-bito"
    base_url = "https://www.kabuki-bito.jp"
    id_prefix = "kabuki"
    block_selectors = THEATERS_SELECTORS

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(f"{self.base_url}/theaters/", THEATERS_SELECTORS, {"kind": "theaters"}),
            ListingPage(f"{self.base_url}/schedule/", SCHEDULE_SELECTORS, {"kind": "schedule"}),
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        if page.context.get("kind") == "schedule":
            self._parse_schedule_row(block, page, events)
        else:
            self._parse_theatre_block(block, events)

    def _run_dates(self, date_text: str) -> tuple[str, Optional[str]]:
        start, end = parse_date_range(date_text, self.today)
        return start or self.today_iso(), end

    def _parse_theatre_block(self, block: Tag, events: EventCollection) -> None:
        title = first_text(block, "h2, h3, .title, .kouen-title, .play-title")
        link = link_href(block)
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

        date_text = all_text(block, ".date, .period, .schedule, .kouen-date")
        venue_text = all_text(block, ".theater, .venue, .hall, .kouen-theater")
        prices = parse_price_range(all_text(block, ".price, .ticket-price"))
        start, end = self._run_dates(date_text)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            date_start=start,
            date_end=end,
            venue_name=venue_text or VENUE_PLACEHOLDER,
            area=detect_kabuki_area(venue_text),
            category="kabuki",
            tags=TAGS,
            price_min=prices.min,
            price_max=prices.max,
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))

    def _parse_schedule_row(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        title = first_text(block, "td, .title, a")
        if len(title) < 3 or self.is_junk(title):
            events.skip("junk_title")
            return

        # Rows without their own link point back at the schedule page; the
        # title keeps their ids apart.
        full_url = self.url(link_href(block)) or page.url

        if events.has_title(title):
            events.skip("duplicate_title")
            return

        date_text = all_text(block, ".date, time, td:first-child")
        venue_text = all_text(block, ".venue, .theater, td:nth-child(2)")
        start, end = self._run_dates(date_text)

        events.add(self.build_event(
            id=self.make_id(full_url + title),
            title_ja=title,
            date_start=start,
            date_end=end,
            venue_name=venue_text or VENUE_PLACEHOLDER,
            area=detect_kabuki_area(venue_text),
            category="kabuki",
            tags=TAGS,
            source_url=full_url,
        ))
