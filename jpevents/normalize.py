from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from typing import NamedTuple, Optional, Tuple
from urllib.parse import urljoin
from zoneinfo import ZoneInfo

import dateparser

from .config import TIMEZONE


# ============================================================
# Helpers
# ============================================================

def local_today(today: Optional[date] = None) -> date:
    return today or datetime.now(ZoneInfo(TIMEZONE)).date()


def today_iso(today: Optional[date] = None) -> str:
    """Run-date fallback used by extractors when no date could be parsed."""
    return local_today(today).isoformat()


def clean_text(s: Optional[str]) -> str:
    return " ".join((s or "").split())


def _iso(year: int | str, month: int | str, day: int | str) -> Optional[str]:
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def _infer_year(month: int, today: date, roll_forward: bool) -> int:
    # Listings only show upcoming events: a month already behind us means next year.
    if roll_forward and month < today.month:
        return today.year + 1
    return today.year


# ============================================================
# Single dates
# ============================================================

_EN_MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}


def _en_month(word: Optional[str]) -> Optional[int]:
    return _EN_MONTHS.get((word or "").strip().rstrip(".").lower())


# 2025年1月15日
_JP_FULL_RE = re.compile(r"(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日")

# 2025.1.15 / 2025/1/15 / 2025-01-15
_NUM_FULL_RE = re.compile(r"(?<!\d)(\d{4})[./\-](\d{1,2})[./\-](\d{1,2})(?!\d)")

# 1月15日
_JP_SHORT_RE = re.compile(r"(\d{1,2})月\s*(\d{1,2})日")

# 1/15 or 1.15(水)
_NUM_SHORT_RE = re.compile(r"(?<![\d./])(\d{1,2})[./](\d{1,2})(?![\d./])")

# Jan 15, 2025 / January 15
_EN_SINGLE_RE = re.compile(
    r"\b([A-Za-z]{3,9})\.?\s+(\d{1,2})(?:st|nd|rd|th)?(?!\d)(?:,?\s+(\d{4}))?"
)

# 15 Jan 2025 / 1st February
_EN_DAY_FIRST_RE = re.compile(
    r"(?<![\d:./])(\d{1,2})(?:st|nd|rd|th)?\s+([A-Za-z]{3,9})\b\.?(?:,?\s+(\d{4}))?"
)

# Parsed dates further away than this are misreads, not listings
_PLAUSIBLE_YEARS_BEFORE = 1
_PLAUSIBLE_YEARS_AFTER = 2


def _parse_with_dateparser(text: str, today: date) -> Optional[str]:
    """
    Fallback parser for whatever the patterns above miss
    (e.g. 'Saturday the 1st of February').
    """
    if not re.search(r"\d", text):
        return None
    try:
        dt = dateparser.parse(
            text,
            languages=["ja", "en"],
            settings={
                "PREFER_DATES_FROM": "future",
                "RELATIVE_BASE": datetime(today.year, today.month, today.day),
                "REQUIRE_PARTS": ["day", "month"],
            },
        )
    except (ValueError, OverflowError):
        return None
    if dt is None:
        return None
    if not today.year - _PLAUSIBLE_YEARS_BEFORE <= dt.year <= today.year + _PLAUSIBLE_YEARS_AFTER:
        return None
    return dt.date().isoformat()


def parse_date(
    text: Optional[str],
    today: Optional[date] = None,
    *,
    roll_forward: bool = True,
) -> Optional[str]:
    """
    Parse one date out of free listing text. Returns 'YYYY-MM-DD' or None.

    Tried in order:
      - '2025年1月15日'
      - '2025.1.15', '2025/1/15', '2025-01-15'
      - '1月15日'           (year inferred)
      - '1/15', '1.15(水)'  (year inferred)
      - 'Jan 15, 2025', 'January 15'
      - '15 Jan 2025', '15-16 Nov' (start of a day-first range)
      - dateparser fallback (ja/en)

    Year inference uses the current year; with roll_forward a month earlier
    than the current month is taken to be next year's.
    None means "unknown"; callers decide on their own fallback.
    """
    s = clean_text(text)
    if not s:
        return None

    ref = local_today(today)

    m = _JP_FULL_RE.search(s)
    if m:
        iso = _iso(*m.groups())
        if iso:
            return iso

    for m in _NUM_FULL_RE.finditer(s):
        iso = _iso(*m.groups())
        if iso:
            return iso

    for m in _JP_SHORT_RE.finditer(s):
        month, day = int(m.group(1)), int(m.group(2))
        iso = _iso(_infer_year(month, ref, roll_forward), month, day)
        if iso:
            return iso

    for m in _NUM_SHORT_RE.finditer(s):
        month, day = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            continue
        iso = _iso(_infer_year(month, ref, roll_forward), month, day)
        if iso:
            return iso

    for m in _EN_SINGLE_RE.finditer(s):
        month = _en_month(m.group(1))
        if not month:
            continue
        day = int(m.group(2))
        year = int(m.group(3)) if m.group(3) else _infer_year(month, ref, roll_forward)
        iso = _iso(year, month, day)
        if iso:
            return iso

    found = _en_day_range(s, ref, roll_forward)
    if found:
        return found[0]

    for m in _EN_DAY_FIRST_RE.finditer(s):
        month = _en_month(m.group(2))
        if not month:
            continue
        day = int(m.group(1))
        year = int(m.group(3)) if m.group(3) else _infer_year(month, ref, roll_forward)
        iso = _iso(year, month, day)
        if iso:
            return iso

    return _parse_with_dateparser(s, ref)


# ============================================================
# Date ranges
# ============================================================

_WEEKDAY = r"(?:\s*[（(][^）)]{1,4}[）)])?"
_RANGE_SEP = r"\s*[〜～~\-–—]\s*"

# 1月2日〜26日 / 1月2日〜2月15日 / 2025年1月15日〜2025年2月28日 / 2025.1.15(水)～2.28(金)
_JP_RANGE_RE = re.compile(
    r"(?<!\d)(?:(?P<sy>\d{4})[年./]\s*)?(?P<sm>\d{1,2})[月./]\s*(?P<sd>\d{1,2})日?(?!\d)"
    + _WEEKDAY
    + _RANGE_SEP
    + r"(?:(?P<ey>\d{4})[年./]\s*)?(?:(?P<em>\d{1,2})[月./]\s*)?(?P<ed>\d{1,2})日?(?![\d:])"
)

# Jan 15 - Feb 28, 2025 / January 15 - 28
_EN_RANGE_RE = re.compile(
    r"\b(?P<sm>[A-Za-z]{3,9})\.?\s+(?P<sd>\d{1,2})(?:st|nd|rd|th)?(?!\d)(?:,?\s+(?P<sy>\d{4}))?"
    r"\s*[-–~〜]\s*"
    r"(?:(?P<em>[A-Za-z]{3,9})\.?\s+)?(?P<ed>\d{1,2})(?:st|nd|rd|th)?(?!\d)(?:,?\s+(?P<ey>\d{4}))?"
)


# 15-16 Nov / 15 November - 2 December 2025 / 28 Dec 2025 - 3 Jan 2026
_EN_DAY_RANGE_RE = re.compile(
    r"(?<![\d:./])(?P<sd>\d{1,2})(?:st|nd|rd|th)?(?:\s+(?P<sm>[A-Za-z]{3,9})\b\.?)?(?:,?\s+(?P<sy>\d{4}))?"
    r"\s*[-–~〜]\s*"
    r"(?P<ed>\d{1,2})(?:st|nd|rd|th)?\s+(?P<em>[A-Za-z]{3,9})\b\.?(?:,?\s+(?P<ey>\d{4}))?"
)


def _jp_range(s: str, ref: date) -> Optional[Tuple[str, str]]:
    for m in _JP_RANGE_RE.finditer(s):
        sm = int(m.group("sm"))
        em = int(m.group("em")) if m.group("em") else sm
        start_year = int(m.group("sy")) if m.group("sy") else ref.year
        if m.group("ey"):
            end_year = int(m.group("ey"))
        else:
            end_year = start_year + 1 if em < sm else start_year

        start = _iso(start_year, sm, m.group("sd"))
        end = _iso(end_year, em, m.group("ed"))
        if start and end:
            return start, end
    return None


def _en_range(s: str, ref: date) -> Optional[Tuple[str, str]]:
    for m in _EN_RANGE_RE.finditer(s):
        sm = _en_month(m.group("sm"))
        if not sm:
            continue
        if m.group("em"):
            em = _en_month(m.group("em"))
            if not em:
                continue
        else:
            em = sm

        crosses_year = em < sm
        if m.group("sy"):
            start_year = int(m.group("sy"))
        elif m.group("ey"):
            start_year = int(m.group("ey")) - (1 if crosses_year else 0)
        else:
            start_year = ref.year
        if m.group("ey"):
            end_year = int(m.group("ey"))
        else:
            end_year = start_year + (1 if crosses_year else 0)

        start = _iso(start_year, sm, m.group("sd"))
        end = _iso(end_year, em, m.group("ed"))
        if start and end:
            return start, end
    return None


def _en_day_range(s: str, ref: date, roll_forward: bool = False) -> Optional[Tuple[str, str]]:
    """Day-first English ranges; the start month defaults to the end month."""
    for m in _EN_DAY_RANGE_RE.finditer(s):
        em = _en_month(m.group("em"))
        if not em:
            continue
        if m.group("sm"):
            sm = _en_month(m.group("sm"))
            if not sm:
                continue
        else:
            sm = em

        crosses_year = em < sm
        if m.group("sy"):
            start_year = int(m.group("sy"))
        elif m.group("ey"):
            start_year = int(m.group("ey")) - (1 if crosses_year else 0)
        else:
            start_year = _infer_year(sm, ref, roll_forward)
        if m.group("ey"):
            end_year = int(m.group("ey"))
        else:
            end_year = start_year + (1 if crosses_year else 0)

        start = _iso(start_year, sm, m.group("sd"))
        end = _iso(end_year, em, m.group("ed"))
        if start and end:
            return start, end
    return None


def parse_date_range(
    text: Optional[str],
    today: Optional[date] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (start, end) ISO dates. end is None for single dates.

    Ranges keep the start in the given (or current) year and only move the
    end forward when the range crosses new year ('12月20日〜1月5日').
    """
    s = clean_text(text)
    if not s:
        return None, None

    ref = local_today(today)

    found = _jp_range(s, ref) or _en_range(s, ref) or _en_day_range(s, ref)
    if found:
        return found

    return parse_date(s, ref, roll_forward=False), None


# ============================================================
# Prices
# ============================================================

class PriceRange(NamedTuple):
    min: Optional[int]
    max: Optional[int]


_CURRENCY_RE = re.compile(r"[¥円]|JPY|yen", re.IGNORECASE)


def parse_price_range(
    text: Optional[str],
    *,
    floor: int = 100,
    ceiling: Optional[int] = None,
) -> PriceRange:
    """
    '¥5,000〜¥8,000' -> PriceRange(5000, 8000)

    Every digit run is a candidate; values outside [floor, ceiling] are
    treated as noise (seat rows, dates, ages), not prices.
    """
    if not text:
        return PriceRange(None, None)

    s = unicodedata.normalize("NFKC", text)
    s = s.replace(",", "")
    s = _CURRENCY_RE.sub(" ", s)

    values = [int(n) for n in re.findall(r"\d+", s)]
    values = [v for v in values if v >= floor and (ceiling is None or v <= ceiling)]

    if not values:
        return PriceRange(None, None)
    return PriceRange(min(values), max(values))


# ============================================================
# Ids, URLs, language
# ============================================================

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _js_string_hash(s: str) -> int:
    """32-bit signed rolling hash over UTF-16 code units (h = h*31 + c)."""
    h = 0
    data = s.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h = (h * 31 + (data[i] | (data[i + 1] << 8))) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_BASE36[r])
    return "".join(reversed(out))


def make_event_id(prefix: str, unique: str) -> str:
    """
    Stable event id: '<prefix>-<base36 hash of unique>'.

    unique is the canonical URL, or URL + title where one URL lists
    several events. Same input -> same id across runs, so re-scrapes upsert.
    """
    return f"{prefix}-{_to_base36(abs(_js_string_hash(unique)))}"


def resolve_url(link: Optional[str], base_url: str) -> Optional[str]:
    """Absolute links pass through; anything else is resolved against base_url."""
    href = (link or "").strip()
    if not href:
        return None
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith(("#", "javascript:", "mailto:", "tel:", "data:")):
        return None
    return urljoin(base_url.rstrip("/") + "/", href)


_LATIN_RE = re.compile(r"[A-Za-z]")


def is_primarily_latin(text: Optional[str]) -> bool:
    """True when more than half of the non-whitespace characters are A-Z/a-z."""
    compact = re.sub(r"\s", "", text or "")
    if not compact:
        return False
    return len(_LATIN_RE.findall(compact)) / len(compact) > 0.5
