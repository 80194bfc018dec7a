# jpevents/tagging.py
"""
Keyword-based area / category / tag detection for scraped listings.

Pure utility: deterministic, no network, no side effects.

Matching is plain substring search on casefold'ed text, so Latin keywords
are case-insensitive and Japanese keywords match inside compounds
(e.g. "新春浅草歌舞伎" hits both 浅草 and 歌舞伎).

Groups are ORDERED and the first matching group wins. More specific groups
come before generic ones ("クラシック" must be seen before "音楽").
"""
from __future__ import annotations

import re
from typing import Optional


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

AREA_FALLBACK = "Japan"
CATEGORY_FALLBACK = "event"

AREA_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("Tokyo", ("東京", "tokyo", "渋谷", "新宿", "池袋", "銀座", "六本木", "秋葉原", "上野", "浅草")),
    ("Osaka", ("大阪", "osaka", "梅田", "難波", "心斎橋")),
    ("Kyoto", ("京都", "kyoto")),
    ("Yokohama", ("横浜", "yokohama")),
    ("Nagoya", ("名古屋", "nagoya")),
    ("Fukuoka", ("福岡", "fukuoka", "博多")),
    ("Sapporo", ("札幌", "sapporo")),
    ("Kobe", ("神戸", "kobe")),
    ("Hiroshima", ("広島", "hiroshima")),
    ("Sendai", ("仙台", "sendai")),
]

CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("kabuki", ("歌舞伎", "kabuki")),
    ("rakugo", ("落語", "rakugo")),
    ("orchestra", ("オーケストラ", "orchestra", "交響楽", "symphony", "クラシック", "classical")),
    ("musical", ("ミュージカル", "musical", "broadway")),
    ("anime", ("アニメ", "anime", "manga", "漫画", "コラボ", "collab")),
    ("concert", ("コンサート", "concert", "ライブ", "live", "音楽", "music")),
    ("theatre", ("演劇", "theatre", "theater", "舞台", "stage")),
    ("festival", ("祭り", "festival", "まつり", "matsuri")),
    ("art", ("展示", "exhibition", "展覧", "美術", "art", "museum")),
    ("film", ("映画", "film", "movie", "cinema")),
]

AREAS: tuple[str, ...] = tuple(a for a, _ in AREA_KEYWORDS) + (AREA_FALLBACK,)
CATEGORIES: tuple[str, ...] = tuple(c for c, _ in CATEGORY_KEYWORDS) + (CATEGORY_FALLBACK,)

# Media franchises that show up in retail pop-ups and collaboration cafes
FRANCHISE_KEYWORDS: tuple[str, ...] = (
    "呪術廻戦", "jujutsu",
    "鬼滅", "demon slayer",
    "ワンピース", "one piece",
    "スパイファミリー", "spy family",
    "ブルーロック", "blue lock",
    "進撃", "attack on titan",
    "ハイキュー", "haikyu",
    "推しの子", "oshi no ko",
    "チェンソーマン", "chainsaw",
    "東京リベンジャーズ", "tokyo revengers",
)

# Retail listing tags: (tag, keywords)
MERCHANDISE_VOCAB: list[tuple[str, tuple[str, ...]]] = [
    ("limited", ("限定", "limited")),
    ("collaboration", ("コラボ", "collab")),
    ("merchandise", ("グッズ", "goods")),
    ("cafe", ("カフェ", "cafe")),
]


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _normalize_for_matching(text: Optional[str]) -> str:
    """casefold + collapse whitespace."""
    if not text:
        return ""
    s = text.casefold()
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _first_match(text: str, groups: list[tuple[str, tuple[str, ...]]]) -> Optional[str]:
    for value, keywords in groups:
        for kw in keywords:
            if kw in text:
                return value
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_area(text: Optional[str]) -> str:
    """Canonical city for a venue/title string, 'Japan' when nothing matches."""
    return _first_match(_normalize_for_matching(text), AREA_KEYWORDS) or AREA_FALLBACK


def detect_category(text: Optional[str]) -> str:
    """Topic category for title + description text, 'event' when nothing matches."""
    return _first_match(_normalize_for_matching(text), CATEGORY_KEYWORDS) or CATEGORY_FALLBACK


def detect_franchise(text: Optional[str]) -> bool:
    s = _normalize_for_matching(text)
    return any(kw in s for kw in FRANCHISE_KEYWORDS)


def merchandise_tags(title: Optional[str], description: Optional[str] = None) -> list[str]:
    """
    Tags for retail / pop-up listings.
    Falls back to ["shopping", "event"] when nothing specific is found.
    """
    text = _normalize_for_matching(title) + " " + _normalize_for_matching(description)
    tags: list[str] = []

    if detect_franchise(text):
        tags.append("anime")
    if "pop" in text and "up" in text:
        tags.append("pop-up")
    for tag, keywords in MERCHANDISE_VOCAB:
        if any(kw in text for kw in keywords):
            tags.append(tag)

    return tags or ["shopping", "event"]
