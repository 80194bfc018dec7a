from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class NormalizedEvent(BaseModel):
    id: str

    title_ja: str
    title_en: Optional[str] = None
    description_ja: Optional[str] = None
    description_en: Optional[str] = None

    date_start: str                    # ISO date, run date when unparsable
    date_end: Optional[str] = None     # multi-day runs only

    venue_name: str
    venue_address: Optional[str] = None
    area: str = "Japan"
    category: str = "event"
    tags: List[str] = Field(default_factory=list)

    price_min: Optional[int] = None
    price_max: Optional[int] = None

    source_url: str
    source_name: str
    image_url: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(t for t in v if t))

    @model_validator(mode="after")
    def _check_title(self) -> "NormalizedEvent":
        if not (self.title_ja or "").strip() and not (self.title_en or "").strip():
            raise ValueError("event needs title_ja or title_en")
        return self

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class SourceOutcome(BaseModel):
    source: str
    key: str
    events: List[NormalizedEvent] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    duration_ms: int = 0
    stats: Dict[str, int] = Field(default_factory=dict)


class RunReport(BaseModel):
    outcomes: List[SourceOutcome] = Field(default_factory=list)
    total_events: int = 0
    total_errors: int = 0
    total_duration_ms: int = 0


class EventFilters(BaseModel):
    """Filters accepted by the record store's query()."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    area: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None
    source: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
