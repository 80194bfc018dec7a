"""
Small helpers over BeautifulSoup's CSS selection.

Listing markup is unstable, so every lookup takes an ordered selector list
and reads "first match wins" rather than relying on a single class name.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from ..normalize import clean_text


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def select_blocks(root: Tag, selectors: Iterable[str]) -> List[Tag]:
    """
    Ordered union of every selector's matches.
    Each node appears once, at the position of its first selector. A match
    that contains another match is a wrapper (a theatre section around its
    plays) and is dropped in favour of the inner blocks.
    """
    seen: set[int] = set()
    out: List[Tag] = []
    for sel in selectors:
        for node in root.select(sel):
            if id(node) in seen:
                continue
            seen.add(id(node))
            out.append(node)
    return [n for n in out if not any(id(d) in seen for d in n.find_all(True))]


def first(root: Tag, selector: str) -> Optional[Tag]:
    """First match in document order for a comma-separated selector group."""
    return root.select_one(selector)


def first_text(root: Tag, selector: str) -> str:
    el = root.select_one(selector)
    return clean_text(el.get_text(" ", strip=True)) if el else ""


def all_text(root: Tag, selector: str) -> str:
    """Concatenated text of every match (like reading a multi-element selection)."""
    return clean_text(" ".join(el.get_text(" ", strip=True) for el in root.select(selector)))


def link_href(el: Optional[Tag]) -> Optional[str]:
    """href of the element itself, else of its first descendant anchor."""
    if el is None:
        return None
    href = el.get("href")
    if href:
        return str(href)
    a = el.find("a", href=True)
    return str(a["href"]) if a else None


def image_src(root: Tag) -> Optional[str]:
    img = root.find("img")
    if img is None:
        return None
    return img.get("src") or img.get("data-src") or None
