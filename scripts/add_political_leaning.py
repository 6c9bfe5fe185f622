#!/usr/bin/env python3

"""
Political Leaning Backfill - Add ``politicalLeaning`` to every topic of an
existing states-topics.json without re-scraping anything.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aggregation_engine.aggregator import apply_political_leaning
from aggregation_engine.store_loader import read_store, save_store
from fetchers.leaning_categorizer import LeaningCategorizer
from statemap_engine.config import DEFAULT_OUTPUT_PATH
from statemap_engine.errors import MalformedPersistedStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def backfill(path: Path, recompute: bool = False, longest_match_only: bool = False) -> tuple[int, int]:
    """Classify the topics stored at *path* in place; returns (total, classified)."""
    store = read_store(path)
    categorizer = LeaningCategorizer(longest_match_only=longest_match_only)
    updated, total, classified = apply_political_leaning(store, categorizer, recompute=recompute)
    save_store(path, updated)
    return total, classified


def main() -> int:
    parser = argparse.ArgumentParser(description="Add political leaning scores to an existing dataset")
    parser.add_argument("path", nargs="?", type=Path, default=DEFAULT_OUTPUT_PATH, help="Aggregate JSON file")
    parser.add_argument("--recompute", action="store_true", help="Reclassify topics that already have a score")
    parser.add_argument("--longest-match-only", action="store_true",
                        help="Do not count keywords nested inside a longer matched keyword")
    args = parser.parse_args()

    if not args.path.exists():
        logger.error(f"❌ {args.path} does not exist")
        return 1

    try:
        total, classified = backfill(args.path, args.recompute, args.longest_match_only)
    except MalformedPersistedStore as e:
        # refuse to overwrite a file we could not read
        logger.error(f"❌ {e}")
        return 1

    logger.info(f"Total topics: {total}")
    logger.info(f"Classified topics: {classified}")
    logger.info(f"✓ Updated {args.path} with political leaning classifications")
    return 0


if __name__ == "__main__":
    sys.exit(main())
