from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client, create_client

from .config import require_supabase_env
from .models import EventFilters, NormalizedEvent

logger = logging.getLogger(__name__)

DISTINCT_FIELDS = ("area", "category", "source_name")


class StoreError(Exception):
    """Invalid request against the record store."""


# -----------------------------------------------------------------------------
# Row building
# -----------------------------------------------------------------------------

def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def build_events_row(ev: NormalizedEvent, *, updated_at: Optional[str] = None) -> Dict[str, Any]:
    """
    Build a dict suitable for upserting into public.events.

    Pure function (no DB calls), used by upsert() and testable in isolation.
    """
    row = ev.to_row()
    row["tags"] = list(ev.tags) or None
    row["updated_at"] = updated_at or _now_iso()
    return row


def _escape_or_value(value: str) -> str:
    # PostgREST or() filters are comma / parenthesis separated
    return value.replace(",", " ").replace("(", " ").replace(")", " ").strip()


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------

class SupabaseEventStore:
    """
    public.events accessed through supabase-py.

    Every write is an idempotent upsert keyed by id, so re-running a crawl
    refreshes rows instead of duplicating them.
    """

    def __init__(self, client: Client, table: str = "events") -> None:
        self.client = client
        self.table = table

    @classmethod
    def from_env(cls) -> "SupabaseEventStore":
        url, key = require_supabase_env()
        return cls(create_client(url, key))

    def upsert(self, ev: NormalizedEvent) -> None:
        row = build_events_row(ev)
        try:
            self.client.table(self.table).upsert(row, on_conflict="id").execute()
        except Exception as e:
            logger.warning("[storage] upsert FAILED id=%s: %s: %s", ev.id, type(e).__name__, e)
            raise

    def get(self, event_id: str) -> Optional[Dict[str, Any]]:
        resp = (
            self.client.table(self.table)
            .select("*")
            .eq("id", event_id)
            .limit(1)
            .execute()
        )
        data = getattr(resp, "data", None) or []
        return data[0] if data else None

    def query(self, filters: Optional[EventFilters] = None) -> Tuple[List[Dict[str, Any]], int]:
        """
        Filtered, date-ordered page of events plus the total match count.

        end_date keeps runs that end by then, and single-day events that
        start by then.
        """
        f = filters or EventFilters()
        offset = (f.page - 1) * f.limit

        q = self.client.table(self.table).select("*", count="exact")

        if f.start_date:
            q = q.gte("date_start", f.start_date)
        if f.end_date:
            q = q.or_(f"date_end.lte.{f.end_date},and(date_end.is.null,date_start.lte.{f.end_date})")
        if f.area:
            q = q.ilike("area", f.area)
        if f.category:
            q = q.ilike("category", f.category)
        if f.source:
            q = q.ilike("source_name", f.source)
        if f.search:
            s = _escape_or_value(f.search)
            q = q.or_(
                f"title_ja.ilike.%{s}%,title_en.ilike.%{s}%,"
                f"description_ja.ilike.%{s}%,description_en.ilike.%{s}%"
            )

        resp = q.order("date_start", desc=False).range(offset, offset + f.limit - 1).execute()

        data: Any = getattr(resp, "data", None) or []
        total = getattr(resp, "count", None) or 0
        return list(data), int(total)

    def list_distinct(self, field: str) -> List[str]:
        if field not in DISTINCT_FIELDS:
            raise StoreError(f"Unsupported field for list_distinct: {field!r}")

        resp = self.client.table(self.table).select(field).order(field).execute()
        data: Any = getattr(resp, "data", None) or []
        values = {r.get(field) for r in data if r.get(field)}
        return sorted(values)
