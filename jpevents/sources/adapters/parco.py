from __future__ import annotations

import re
from typing import List, NamedTuple, Optional

from bs4 import Tag

from ...normalize import parse_date_range
from ...tagging import merchandise_tags
from ..base import BaseAdapter
from ..collection import EventCollection
from ..markup import all_text, first, first_text, image_src, link_href
from ..types import ListingPage


class ParcoLocation(NamedTuple):
    name: str
    area: str
    address: str


LOCATIONS = [
    ParcoLocation("渋谷PARCO", "Tokyo", "東京都渋谷区宇田川町15-1"),
    ParcoLocation("池袋PARCO", "Tokyo", "東京都豊島区南池袋1-28-2"),
    ParcoLocation("名古屋PARCO", "Nagoya", "名古屋市中区栄3-29-1"),
    ParcoLocation("心斎橋PARCO", "Osaka", "大阪市中央区心斎橋筋1-8-3"),
    ParcoLocation("福岡PARCO", "Fukuoka", "福岡市中央区天神2-11-1"),
]
SHIBUYA, IKEBUKURO = LOCATIONS[0], LOCATIONS[1]

# Ward names that only ever mean the flagship store there
WARD_FALLBACKS = [
    (("渋谷", "shibuya"), SHIBUYA),
    (("池袋", "ikebukuro"), IKEBUKURO),
]

SHIBUYA_BASE = "https://shibuya.parco.jp"

ART_SELECTORS = (".exhibition-item", ".event-card", "article", ".news-item", ".pickup-item")
SHIBUYA_SELECTORS = (".event-item", "article", ".card", ".list-item")

_ANIME_RE = re.compile(
    r"アニメ|anime|漫画|manga|コラボ|collab|キャラクター|character|ポップアップ|pop.?up|グッズ|goods"
)
_ART_RE = re.compile(r"展|exhibition|アート|art|ギャラリー|gallery")


def match_location(text: Optional[str]) -> Optional[ParcoLocation]:
    s = text or ""
    for loc in LOCATIONS:
        if loc.name in s or loc.name.replace("PARCO", "パルコ") in s:
            return loc
    lowered = s.lower()
    for keywords, loc in WARD_FALLBACKS:
        if any(kw in lowered for kw in keywords):
            return loc
    return None


def detect_event_type(text: Optional[str]) -> str:
    """Pop-ups and collaborations first, then exhibitions, else a generic event."""
    s = (text or "").lower()
    if _ANIME_RE.search(s):
        return "anime"
    if _ART_RE.search(s):
        return "art"
    return "event"


class ParcoAdapter(BaseAdapter):
    """
    PARCO art site plus Shibuya PARCO's own event page (collaboration cafes,
    pop-up shops). Shibuya records get their own id prefix.
    """

    name = "Parco"
    base_url = "https://art.parco.jp"
    id_prefix = "parco"
    block_selectors = ART_SELECTORS
    min_title_length = 3

    def listing_pages(self) -> List[ListingPage]:
        return [
            ListingPage(f"{self.base_url}/", ART_SELECTORS, {"store": None}),
            ListingPage(f"{SHIBUYA_BASE}/event/", SHIBUYA_SELECTORS, {"store": SHIBUYA}),
        ]

    def parse_block(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        if page.context.get("store") is SHIBUYA:
            self._parse_shibuya(block, page, events)
        else:
            self._parse_art(block, events)

    def _parse_art(self, block: Tag, events: EventCollection) -> None:
        title_el = first(block, "h2, h3, .title, a.title, .event-title")
        title = title_el.get_text(" ", strip=True) if title_el else ""
        if not title:
            anchor = block.find("a")
            title = anchor.get_text(" ", strip=True) if anchor else ""
        if self.is_junk(title):
            events.skip("junk_title")
            return

        full_url = self.url(link_href(title_el) or link_href(block)) or self.base_url
        if events.has_url(full_url):
            events.skip("duplicate_url")
            return

        date_text = all_text(block, ".date, .period, .schedule, time")
        venue_text = all_text(block, ".venue, .place, .location, .shop")
        description = first_text(block, ".description, .excerpt, .text, p")

        start, end = parse_date_range(date_text, self.today)
        location = match_location(venue_text or title)

        events.add(self.build_event(
            id=self.make_id(full_url),
            title_ja=title,
            description_ja=description or None,
            date_start=start or self.today_iso(),
            date_end=end,
            venue_name=location.name if location else (venue_text or "PARCO"),
            venue_address=location.address if location else None,
            area=location.area if location else "Tokyo",
            category=detect_event_type(f"{title} {description}"),
            tags=merchandise_tags(title, description),
            source_url=full_url,
            image_url=self.url(image_src(block)),
        ))

    def _parse_shibuya(self, block: Tag, page: ListingPage, events: EventCollection) -> None:
        title = first_text(block, "h2, h3, .title, a")
        if self.is_junk(title):
            events.skip("junk_title")
            return

        anchor = block.find("a", href=True)
        full_url = self.url(anchor["href"] if anchor else None, SHIBUYA_BASE) or page.url
        if events.has_url(full_url) or events.has_title(title):
            events.skip("duplicate")
            return

        floor_text = all_text(block, ".floor, .shop, .location")
        start, end = parse_date_range(all_text(block, ".date, .period, time"), self.today)

        events.add(self.build_event(
            id=self.make_id(full_url, prefix="parco-shibuya"),
            title_ja=title,
            description_ja=floor_text or None,
            date_start=start or self.today_iso(),
            date_end=end,
            venue_name=f"{SHIBUYA.name} {floor_text}" if floor_text else SHIBUYA.name,
            venue_address=SHIBUYA.address,
            area=SHIBUYA.area,
            category=detect_event_type(title),
            tags=merchandise_tags(title),
            source_url=full_url,
            image_url=self.url(image_src(block), SHIBUYA_BASE),
        ))
