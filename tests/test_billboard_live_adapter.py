# tests/test_billboard_live_adapter.py
from __future__ import annotations

from jpevents.sources.adapters.billboard_live import BillboardLiveAdapter

BASE = "https://www.billboard-live.com"

TOKYO_HTML = """
<div class="schedule-item">
  <p class="date">2025.7.10(木)</p>
  <h3 class="artist-name"><a href="/tokyo/show?event_id=ev-1001">Robert Glasper</a></h3>
  <p class="time">1st Stage Open 17:00 Start 18:00</p>
  <p class="price">Service Area ¥12,500 / Casual Area ¥11,000 (1ドリンク付)</p>
  <img src="https://cdn.billboard-live.com/ev-1001.jpg">
</div>
<div class="schedule-item">
  <p class="date">7.12(土)</p>
  <h3 class="artist-name"><a href="/tokyo/show?event_id=ev-1002">角松敏生</a></h3>
  <p class="price">¥9,800</p>
</div>
<div class="schedule-item">
  <p class="date">7.13(日)</p>
  <h3 class="artist-name"><a href="/tokyo/show?event_id=ev-1001">Robert Glasper</a></h3>
</div>
"""

YOKOHAMA_HTML = "<html><body><p>公演情報は準備中です</p></body></html>"

PAGES = {
    f"{BASE}/tokyo/schedule/": TOKYO_HTML,
    f"{BASE}/yokohama/schedule/": YOKOHAMA_HTML,
}


class TestBillboardLive:
    def test_latin_title_doubles_as_english(self, make_adapter):
        ev = make_adapter(BillboardLiveAdapter, PAGES).run().events[0]

        assert ev.title_ja == "Robert Glasper"
        assert ev.title_en == "Robert Glasper"
        assert ev.source_url == f"{BASE}/tokyo/show?event_id=ev-1001"
        assert ev.date_start == "2025-07-10"
        assert ev.description_ja == "開場/開演: 1st Stage Open 17:00 Start 18:00"
        assert ev.image_url == "https://cdn.billboard-live.com/ev-1001.jpg"

    def test_venue_table(self, make_adapter):
        ev = make_adapter(BillboardLiveAdapter, PAGES).run().events[0]

        assert ev.venue_name == "Billboard Live Tokyo"
        assert ev.venue_address == "東京都港区赤坂9-7-4"
        assert ev.area == "Tokyo"
        assert ev.category == "concert"
        assert ev.tags == ["live", "music", "jazz", "pop"]

    def test_price_band_drops_drink_count(self, make_adapter):
        ev = make_adapter(BillboardLiveAdapter, PAGES).run().events[0]
        assert (ev.price_min, ev.price_max) == (11000, 12500)

    def test_japanese_title_has_no_english(self, make_adapter):
        ev = make_adapter(BillboardLiveAdapter, PAGES).run().events[1]

        assert ev.title_en is None
        assert ev.description_ja is None
        assert ev.date_start == "2025-07-12"
        assert (ev.price_min, ev.price_max) == (9800, 9800)

    def test_repeat_show_url_is_skipped(self, make_adapter):
        outcome = make_adapter(BillboardLiveAdapter, PAGES).run()
        assert len(outcome.events) == 2
        assert outcome.stats["skipped_duplicate_url"] == 1

    def test_venue_failures_and_pauses(self, make_adapter, sleeps):
        outcome = make_adapter(BillboardLiveAdapter, PAGES).run()

        assert outcome.errors == [f"{BASE}/osaka/schedule/: HTTP 404: Not Found"]
        assert sleeps == [0.3, 0.3]
