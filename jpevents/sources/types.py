from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ListingPage:
    """
    One listing page of a source.
    selectors: candidate-block selector chain for this page.
    context: per-page data the block parser needs (category, venue, language...).
    """
    url: str
    selectors: Tuple[str, ...]
    context: Dict[str, Any] = field(default_factory=dict)
