#!/usr/bin/env python3

"""
State Feed Ingestion - Pull the Google Trends RSS feed for each state and merge
its law/government items into the map dataset.  No browser rendering needed.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from scripts.ingest_states import add_common_arguments, exit_code, write_report
from statemap_engine.config import load_settings
from statemap_engine.errors import ConfigurationInvalid
from statemap_engine.ingestion import ingest_feed
from statemap_engine.regions import resolve_regions

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest Google Trends RSS feeds per state")
    add_common_arguments(parser)
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    overrides = {key: value for key, value in vars(args).items() if key not in ("regions", "report", "verbose")}
    try:
        # the feed needs no renderer, so do not demand an Apify token
        settings = load_settings(source="http", **overrides)
    except ConfigurationInvalid as e:
        logger.error(f"❌ {e}")
        return 2

    regions = resolve_regions(args.regions)
    if not regions:
        logger.error("❌ No valid regions to process")
        return 2

    summary = asyncio.run(ingest_feed(settings, regions))

    if args.report:
        write_report(settings.output_path, summary)

    return exit_code(summary)


if __name__ == "__main__":
    sys.exit(main())
