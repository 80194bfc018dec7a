"""
Runs sources one after another and optionally persists what they found.

A failing source never stops the run: page and block failures are handled
inside the adapter, anything that still escapes becomes a zero-event outcome
with one error.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional

from .config import SOURCE_DELAY_S
from .models import RunReport, SourceOutcome
from .sources.base import BaseAdapter, source_key
from .sources.registry import ADAPTERS
from .storage import SupabaseEventStore
from .translate import Translator, fill_missing_titles

logger = logging.getLogger(__name__)

__all__ = ["source_key", "list_sources", "run_one", "run_all"]


def list_sources() -> List[Dict[str, str]]:
    return [
        {"name": cls.name, "key": key, "base_url": cls.base_url}
        for key, cls in ADAPTERS.items()
    ]


def _not_found(key: str) -> SourceOutcome:
    return SourceOutcome(source=key, key=key, errors=[f"Scraper not found: {key}"])


def _persist(outcome: SourceOutcome, store) -> int:
    """Upsert every event; failures are appended to outcome.errors. Returns the number saved."""
    saved = 0
    for ev in outcome.events:
        try:
            store.upsert(ev)
            saved += 1
        except Exception as e:
            outcome.errors.append(f"Error saving event {ev.id}: {e}")
    logger.info("[runner] %s saved=%d of %d", outcome.key, saved, len(outcome.events))
    return saved


def _finish(
    outcome: SourceOutcome,
    *,
    persist: bool,
    store,
    translator: Optional[Translator],
) -> SourceOutcome:
    if translator is not None and outcome.events:
        filled = fill_missing_titles(outcome.events, translator)
        outcome.stats["translated"] = filled
    if persist and outcome.events:
        _persist(outcome, store)
    return outcome


def _run_adapter(adapter: BaseAdapter) -> SourceOutcome:
    try:
        return adapter.run()
    except Exception as e:
        logger.error("[runner] %s failed: %s: %s", adapter.key, type(e).__name__, e)
        return SourceOutcome(source=adapter.name, key=adapter.key, errors=[str(e)], duration_ms=0)


def run_one(
    key: str,
    *,
    persist: bool = True,
    store=None,
    translator: Optional[Translator] = None,
    adapters: Optional[Dict[str, type]] = None,
) -> SourceOutcome:
    registry = adapters if adapters is not None else ADAPTERS
    cls = registry.get(key.lower())
    if cls is None:
        logger.warning("[runner] unknown source: %s", key)
        return _not_found(key)

    if persist and store is None:
        store = SupabaseEventStore.from_env()

    outcome = _run_adapter(cls())
    return _finish(outcome, persist=persist, store=store, translator=translator)


def run_all(
    source_keys: Optional[Iterable[str]] = None,
    *,
    persist: bool = True,
    store=None,
    translator: Optional[Translator] = None,
    delay_s: float = SOURCE_DELAY_S,
    sleep: Callable[[float], None] = time.sleep,
    adapters: Optional[Dict[str, type]] = None,
) -> RunReport:
    """
    Run the given sources (all registered ones by default) sequentially,
    pausing delay_s between sources.
    """
    registry = adapters if adapters is not None else ADAPTERS
    keys = list(registry) if source_keys is None else [k.lower() for k in source_keys]

    if persist and store is None:
        store = SupabaseEventStore.from_env()

    t0 = time.perf_counter()
    report = RunReport()

    for i, key in enumerate(keys):
        cls = registry.get(key)
        if cls is None:
            logger.warning("[runner] unknown source: %s", key)
            outcome = _not_found(key)
        else:
            logger.info("[runner] start %s", key)
            outcome = _run_adapter(cls())
            outcome = _finish(outcome, persist=persist, store=store, translator=translator)
            logger.info(
                "[runner] %s events=%d errors=%d", key, len(outcome.events), len(outcome.errors)
            )

        report.outcomes.append(outcome)
        report.total_events += len(outcome.events)
        report.total_errors += len(outcome.errors)

        if cls is not None and delay_s > 0 and i < len(keys) - 1:
            sleep(delay_s)

    report.total_duration_ms = int((time.perf_counter() - t0) * 1000)
    return report
