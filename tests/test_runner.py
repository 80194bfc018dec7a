# tests/test_runner.py
from __future__ import annotations

from unittest.mock import MagicMock

from jpevents import runner
from jpevents.models import NormalizedEvent, SourceOutcome
from jpevents.sources.base import BaseAdapter
from jpevents.sources.registry import ADAPTER_CLASSES, ADAPTERS
from jpevents.translate import Translator


def _event(i: int, *, title_en=None) -> NormalizedEvent:
    return NormalizedEvent(
        id=f"fake-{i}",
        title_ja="歌舞伎公演",
        title_en=title_en,
        date_start="2025-06-01",
        venue_name="歌舞伎座",
        source_url=f"https://example.jp/{i}",
        source_name="Fake",
    )


class _FakeAdapter(BaseAdapter):
    name = "Fake One"
    base_url = "https://example.jp"
    id_prefix = "fake"
    n_events = 2

    def parse_block(self, block, page, events):  # pragma: no cover
        raise NotImplementedError

    def run(self) -> SourceOutcome:
        return SourceOutcome(
            source=self.name,
            key=self.key,
            events=[_event(i) for i in range(self.n_events)],
            duration_ms=5,
        )


class _OtherAdapter(_FakeAdapter):
    name = "Fake Two"
    n_events = 1


class _BrokenAdapter(_FakeAdapter):
    name = "Broken"

    def run(self) -> SourceOutcome:
        raise RuntimeError("layout changed")


FAKES = {"fake-one": _FakeAdapter, "fake-two": _OtherAdapter, "broken": _BrokenAdapter}


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

def test_registry_keys_follow_names():
    assert list(ADAPTERS) == [
        "tokyo-cheapo",
        "japan-travel",
        "ticket-pia",
        "kabuki-bito",
        "tokyo-art-beat",
        "nhk-symphony",
        "billboard-live",
        "parco",
    ]
    assert len(ADAPTER_CLASSES) == len(ADAPTERS)


def test_registry_id_prefixes_are_unique():
    prefixes = [cls.id_prefix for cls in ADAPTER_CLASSES]
    assert len(set(prefixes)) == len(prefixes)


def test_list_sources():
    sources = runner.list_sources()
    assert sources[0] == {
        "name": "Tokyo Cheapo",
        "key": "tokyo-cheapo",
        "base_url": "https://tokyocheapo.com",
    }
    assert len(sources) == 8


# -----------------------------------------------------------------------------
# run_one
# -----------------------------------------------------------------------------

def test_run_one_persists_every_event():
    store = MagicMock()
    outcome = runner.run_one("fake-one", store=store, adapters=FAKES)

    assert len(outcome.events) == 2
    assert outcome.errors == []
    assert store.upsert.call_count == 2


def test_run_one_key_is_case_insensitive():
    outcome = runner.run_one("Fake-One", persist=False, adapters=FAKES)
    assert outcome.key == "fake-one"
    assert len(outcome.events) == 2


def test_run_one_unknown_key():
    outcome = runner.run_one("nope", persist=False, adapters=FAKES)

    assert outcome.events == []
    assert outcome.errors == ["Scraper not found: nope"]


def test_run_one_unknown_key_needs_no_store(monkeypatch):
    def _boom():
        raise AssertionError("store should not be built")

    monkeypatch.setattr(runner.SupabaseEventStore, "from_env", staticmethod(_boom))
    outcome = runner.run_one("nope", adapters=FAKES)
    assert outcome.errors == ["Scraper not found: nope"]


def test_run_one_fatal_error_becomes_outcome():
    outcome = runner.run_one("broken", persist=False, adapters=FAKES)

    assert outcome.source == "Broken"
    assert outcome.events == []
    assert outcome.errors == ["layout changed"]
    assert outcome.duration_ms == 0


def test_run_one_records_persistence_errors():
    store = MagicMock()
    store.upsert.side_effect = [None, RuntimeError("duplicate key")]

    outcome = runner.run_one("fake-one", store=store, adapters=FAKES)

    assert len(outcome.events) == 2
    assert outcome.errors == ["Error saving event fake-1: duplicate key"]


def test_run_one_no_save_skips_store():
    store = MagicMock()
    runner.run_one("fake-one", persist=False, store=store, adapters=FAKES)
    store.upsert.assert_not_called()


def test_run_one_fills_titles_before_saving():
    store = MagicMock()
    translator = Translator()

    outcome = runner.run_one("fake-one", store=store, translator=translator, adapters=FAKES)

    assert [e.title_en for e in outcome.events] == ["KabukiPerformance", "KabukiPerformance"]
    assert outcome.stats["translated"] == 2
    saved = store.upsert.call_args_list[0].args[0]
    assert saved.title_en == "KabukiPerformance"


# -----------------------------------------------------------------------------
# run_all
# -----------------------------------------------------------------------------

def test_run_all_totals_and_order():
    sleeps = []
    report = runner.run_all(
        persist=False, adapters=FAKES, delay_s=1.0, sleep=sleeps.append,
    )

    assert [o.key for o in report.outcomes] == ["fake-one", "fake-two", "broken"]
    assert report.total_events == 3
    assert report.total_errors == 1
    # pause between sources, not after the last
    assert sleeps == [1.0, 1.0]


def test_run_all_subset_with_unknown_key():
    sleeps = []
    report = runner.run_all(
        ["FAKE-TWO", "missing"], persist=False, adapters=FAKES, delay_s=1.0, sleep=sleeps.append,
    )

    assert [o.key for o in report.outcomes] == ["fake-two", "missing"]
    assert report.outcomes[1].errors == ["Scraper not found: missing"]
    assert report.total_events == 1
    assert report.total_errors == 1
    assert sleeps == [1.0]


def test_run_all_persistence_errors_count_in_totals():
    store = MagicMock()
    store.upsert.side_effect = RuntimeError("offline")

    report = runner.run_all(["fake-two"], store=store, adapters=FAKES, delay_s=0)

    assert report.outcomes[0].errors == ["Error saving event fake-0: offline"]
    assert report.total_errors == 1


def test_run_all_builds_store_from_env(monkeypatch):
    store = MagicMock()
    monkeypatch.setattr(runner.SupabaseEventStore, "from_env", staticmethod(lambda: store))

    runner.run_all(["fake-two"], adapters=FAKES, delay_s=0)

    assert store.upsert.call_count == 1
