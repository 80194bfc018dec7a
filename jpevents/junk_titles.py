# jpevents/junk_titles.py
"""
Single source of truth for "is this scraped title a real event title?".

Imported by every adapter before a block is turned into an event.

Rules are deterministic (no NLP):
  1. Empty or whitespace-only → junk
  2. Shorter than the adapter's minimum length → junk
  3. Exact match (case-insensitive) against navigation labels → junk
  4. Contains only whitespace / digits / punctuation (no letters, kana or kanji) → junk
"""
from __future__ import annotations

import re

# Link labels that listing pages repeat next to every card
JUNK_TITLES_EXACT: frozenset[str] = frozenset({
    "詳細",
    "詳細はこちら",
    "もっと見る",
    "一覧",
    "一覧へ",
    "more",
    "read more",
    "details",
    "view more",
})

# Regex: title is purely whitespace, digits, punctuation — no real words
_STRUCTURAL_ONLY_RE = re.compile(r"^[\s\d\W_]*$", re.UNICODE)


def is_junk_title(title: str | None, min_length: int = 2) -> bool:
    """Return True if *title* cannot be an event title."""
    t = " ".join((title or "").split())
    if not t:
        return True
    if len(t) < min_length:
        return True
    if t.lower() in JUNK_TITLES_EXACT:
        return True
    if _STRUCTURAL_ONLY_RE.fullmatch(t):
        return True
    return False
