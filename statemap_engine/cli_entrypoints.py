#!/usr/bin/env python3
"""Console-script wrappers for the ingestion scripts.

After an editable install (``pip install -e .``) the following commands become
available system-wide:

* ``statemap-ingest``            - scrape the trends page for each state
* ``statemap-ingest-feed``       - ingest the per-state RSS feeds instead
* ``statemap-backfill-leaning``  - add political leaning to an existing dataset
* ``statemap-refresh``           - re-run ingestion on an interval

Command-line arguments are passed through unchanged.
"""
from __future__ import annotations

import sys
from pathlib import Path
from subprocess import run

PYTHON = sys.executable
ROOT = Path(__file__).resolve().parents[1]  # Repository root


def _exec(script: str) -> None:
    """Run *script* with this interpreter and propagate its exit status."""
    result = run([PYTHON, str(ROOT / "scripts" / script), *sys.argv[1:]])
    sys.exit(result.returncode)


# ---------------------------------------------------------------------------
# Entry-points
# ---------------------------------------------------------------------------

def ingest() -> None:
    _exec("ingest_states.py")


def ingest_feed() -> None:
    _exec("ingest_feed.py")


def backfill_leaning() -> None:
    _exec("add_political_leaning.py")


def refresh() -> None:
    _exec("refresh_scheduler.py")
