from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .models import RunReport, SourceOutcome
from .runner import list_sources, run_all, run_one
from .translate import Translator


def _print_sources() -> None:
    print("\nAvailable sources:")
    print("==================")
    for s in list_sources():
        print(f"  {s['key']:<20} {s['name']} ({s['base_url']})")
    print("\nUsage:")
    print("  jpevents-scrape                # Run all sources")
    print("  jpevents-scrape list           # List available sources")
    print("  jpevents-scrape <source> ...   # Run specific sources")


def _print_outcome(outcome: SourceOutcome) -> None:
    print(f"\nResults for {outcome.source}:")
    print(f"  Events found: {len(outcome.events)}")
    print(f"  Errors: {len(outcome.errors)}")
    print(f"  Duration: {outcome.duration_ms}ms")

    if outcome.errors:
        print("\nErrors:")
        for e in outcome.errors:
            print(f"  - {e}")

    if outcome.events:
        print("\nSample events:")
        for ev in outcome.events[:3]:
            print(f"  - {ev.title_ja or ev.title_en} ({ev.category})")
            print(f"    {ev.date_start} @ {ev.venue_name}")


def _print_report(report: RunReport) -> None:
    print("\n" + "=" * 40)
    print("SUMMARY")
    print("=" * 40)
    print(f"Total events: {report.total_events}")
    print(f"Total errors: {report.total_errors}")
    print(f"Total time: {report.total_duration_ms / 1000:.1f}s")

    print("\nPer source:")
    for o in report.outcomes:
        status = "OK  " if not o.errors else "FAIL"
        print(f"  {status} {o.source:<20} {len(o.events)} events ({len(o.errors)} errors)")


def _print_summary_line(report: RunReport, persisted: bool) -> None:
    # ---------------------------------------------------------------
    # Deterministic, grep-friendly summary line.
    # grep '[pipeline][summary]' /tmp/pipeline.log
    # ---------------------------------------------------------------
    failed = sum(1 for o in report.outcomes if o.errors)
    print(
        f"[pipeline][summary]"
        f" sources_run={len(report.outcomes)}"
        f" sources_failed={failed}"
        f" extracted={report.total_events}"
        f" persisted={'yes' if persisted else 'no'}"
        f" errors={report.total_errors}"
        f" duration_ms={report.total_duration_ms}"
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jpevents-scrape",
        description="Crawl Japanese event listings into the events table.",
    )
    parser.add_argument(
        "sources",
        nargs="*",
        help="Source keys to run (default: all). Use 'list' to show available sources.",
    )
    parser.add_argument("--no-save", action="store_true", help="Do not write events to the store.")
    parser.add_argument(
        "--translate",
        action="store_true",
        help="Fill missing English titles (DeepL / Google when keys are set, glossary otherwise).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.sources == ["list"]:
        _print_sources()
        return 0

    persist = not args.no_save
    translator = Translator.from_env() if args.translate else None

    print("PIPELINE: start")
    print("=" * 40)

    if len(args.sources) == 1:
        outcome = run_one(args.sources[0], persist=persist, translator=translator)
        _print_outcome(outcome)
        report = RunReport(
            outcomes=[outcome],
            total_events=len(outcome.events),
            total_errors=len(outcome.errors),
            total_duration_ms=outcome.duration_ms,
        )
    else:
        report = run_all(args.sources or None, persist=persist, translator=translator)
        _print_report(report)

    _print_summary_line(report, persisted=persist)
    return 0 if report.total_errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
