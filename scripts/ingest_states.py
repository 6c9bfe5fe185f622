#!/usr/bin/env python3

"""
State Trends Ingestion - Scrape the Google Trends "trending now" page for each
US state, extract Law & Government topics and merge them into the map dataset.

Usage:
    python scripts/ingest_states.py                      # every state + PR + DC
    python scripts/ingest_states.py California New York  # a subset
    python scripts/ingest_states.py --source fixture --fixture-dir snapshots/ --report
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aggregation_engine.store_loader import load_store, store_to_frame
from fetchers.leaning_categorizer import get_political_leaning_label
from statemap_engine.config import load_settings
from statemap_engine.errors import ConfigurationInvalid
from statemap_engine.ingestion import RunSummary, ingest_pages
from statemap_engine.regions import resolve_regions

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by the page and feed ingestion scripts; all override STATEMAP_* env values."""
    parser.add_argument("regions", nargs="*", help="Region names or codes (default: all)")
    parser.add_argument("--concurrency", type=int, help="Regions processed at once")
    parser.add_argument("--timeout-ms", dest="region_timeout_ms", type=int, help="Per-region timeout")
    parser.add_argument("--delay-ms", dest="region_delay_ms", type=int, help="Pause after each region")
    parser.add_argument("--top-n", dest="top_n", type=int, help="Topics kept per region")
    parser.add_argument("--min-score", dest="min_relevance_score", type=int, help="Relevance floor")
    parser.add_argument("--output", dest="output_path", type=Path, help="Aggregate JSON file")
    parser.add_argument("--report", action="store_true", help="Write a text report next to the output file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")


def generate_store_report(df: pd.DataFrame, summary: Optional[RunSummary] = None) -> str:
    """Plain-text overview of the persisted topics and of the last run."""
    report_lines = [
        "=" * 80,
        f"STATE TRENDING TOPICS REPORT - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "=" * 80,
        "",
        "📊 OVERVIEW:",
        f"  • Regions in store: {df['region'].nunique()}",
        f"  • Topics in store: {len(df):,}",
    ]
    if not df.empty:
        report_lines.append(f"  • Average relevance: {df['relevance_score'].mean():.1f}/100")

    if summary is not None:
        counts = summary.counts()
        report_lines.append(
            f"  • Last run: {counts['succeeded']} succeeded, {counts['failed']} failed, {counts['skipped']} skipped"
        )

    if not df.empty:
        labels = df["political_leaning"].map(
            lambda score: get_political_leaning_label(None if pd.isna(score) else int(score))
        )
        report_lines.extend(["", "🧭 POLITICAL LEANING:"])
        for label, count in labels.value_counts().items():
            report_lines.append(f"  • {label}: {count} topics ({count / len(df) * 100:.1f}%)")

        report_lines.extend(["", "🗺️ TOP TOPIC PER REGION:"])
        top = df[df["rank"] == 1].sort_values("relevance_score", ascending=False)
        for _, row in top.iterrows():
            volume = row["search_volume"] if isinstance(row["search_volume"], str) else "N/A"
            report_lines.append(
                f"  • {row['region']} ({row['code']}): {row['topic']} "
                f"(Score: {row['relevance_score']}, {volume})"
            )

    if summary is not None and summary.failed:
        report_lines.extend(["", "❌ FAILED REGIONS:"])
        for outcome in summary.failed:
            report_lines.append(f"  • {outcome.region.name} [{outcome.error_kind}]: {outcome.message}")

    report_lines.extend(["", "=" * 80])
    return "\n".join(report_lines)


def write_report(output_path: Path, summary: Optional[RunSummary] = None) -> Path:
    df = store_to_frame(load_store(output_path))
    report_path = output_path.with_name(f"{output_path.stem}-report.txt")
    report_path.write_text(generate_store_report(df, summary), encoding="utf-8")
    logger.info(f"📝 Report saved: {report_path}")
    return report_path


def exit_code(summary: RunSummary) -> int:
    # every attempted region failed: something upstream is broken
    return 1 if summary.failed and not summary.succeeded and not summary.skipped else 0


def main() -> int:
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Scrape Google Trends per state and update the map dataset")
    add_common_arguments(parser)
    parser.add_argument("--source", choices=["apify", "http", "fixture"], help="Where page HTML comes from")
    parser.add_argument("--fixture-dir", dest="fixture_dir", type=Path, help="Directory of <geo>.html snapshots")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    overrides = {key: value for key, value in vars(args).items() if key not in ("regions", "report", "verbose")}
    try:
        settings = load_settings(**overrides)
    except ConfigurationInvalid as e:
        logger.error(f"❌ {e}")
        return 2

    regions = resolve_regions(args.regions)
    if not regions:
        logger.error("❌ No valid regions to process")
        return 2

    summary = asyncio.run(ingest_pages(settings, regions))

    if args.report:
        write_report(settings.output_path, summary)

    return exit_code(summary)


if __name__ == "__main__":
    sys.exit(main())
