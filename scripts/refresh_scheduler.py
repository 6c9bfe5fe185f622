#!/usr/bin/env python3

"""
Refresh Scheduler - Re-run state ingestion every N minutes until stopped with
Ctrl+C or SIGTERM.  Each cycle runs ``ingest_states.py`` (or ``ingest_feed.py``
with ``--feed``) in a subprocess so a crash in one cycle cannot take the
scheduler down.
"""

import argparse
import logging
import signal
import subprocess
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aggregation_engine.store_loader import load_store, store_to_frame
from statemap_engine.config import DEFAULT_OUTPUT_PATH

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

SCRIPTS_DIR = Path(__file__).resolve().parent


class RefreshScheduler:
    """Runs ingestion cycles on a fixed interval."""

    def __init__(self, interval_minutes: int = 60, feed: bool = False,
                 extra_args: Optional[List[str]] = None, output_path: Path = DEFAULT_OUTPUT_PATH):
        self.interval_minutes = interval_minutes
        self.interval_seconds = interval_minutes * 60
        self.script = SCRIPTS_DIR / ("ingest_feed.py" if feed else "ingest_states.py")
        self.extra_args = list(extra_args or [])
        self.output_path = output_path
        self.running = False
        self.cycle_count = 0

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals gracefully."""
        logger.info(f"Received signal {signum}, shutting down after this cycle...")
        self.running = False

    def command(self) -> List[str]:
        return [sys.executable, str(self.script), "--output", str(self.output_path), *self.extra_args]

    def run_cycle(self) -> bool:
        """Run one ingestion; True when the script exited cleanly."""
        logger.info(f"🚀 Running {self.script.name}")
        result = subprocess.run(self.command(), cwd=Path.cwd())
        if result.returncode != 0:
            logger.error(f"❌ {self.script.name} exited with status {result.returncode}")
            return False
        return True

    def log_cycle_summary(self, cycle_num: int) -> None:
        df = store_to_frame(load_store(self.output_path))
        if df.empty:
            logger.info(f"📊 Cycle {cycle_num}: store is empty")
            return
        leading = df[df["rank"] == 1].nlargest(3, "relevance_score")
        logger.info(
            f"📊 Cycle {cycle_num}: {df['region'].nunique()} regions, {len(df)} topics; "
            f"top: {', '.join(leading['topic'])}"
        )

    def _sleep(self, seconds: float) -> None:
        # Sleep in chunks so a signal is honoured quickly
        deadline = time.monotonic() + seconds
        while self.running and time.monotonic() < deadline:
            time.sleep(min(10.0, deadline - time.monotonic()))

    def run_forever(self) -> None:
        self.running = True
        self.cycle_count = 0
        logger.info(f"⏰ Refreshing every {self.interval_minutes} minutes; Ctrl+C to stop")

        try:
            while self.running:
                self.cycle_count += 1
                cycle_start = time.monotonic()
                logger.info(f"🔄 Starting cycle {self.cycle_count}")

                if self.run_cycle():
                    self.log_cycle_summary(self.cycle_count)

                cycle_duration = time.monotonic() - cycle_start
                sleep_time = max(0.0, self.interval_seconds - cycle_duration)
                if self.running and sleep_time > 0:
                    next_run = datetime.now() + timedelta(seconds=sleep_time)
                    logger.info(
                        f"😴 Cycle {self.cycle_count} took {cycle_duration:.1f}s. "
                        f"Next run at {next_run.strftime('%H:%M:%S')}"
                    )
                    self._sleep(sleep_time)
        except KeyboardInterrupt:
            logger.info("🛑 Received keyboard interrupt")
        finally:
            self.running = False
            logger.info(f"🏁 Stopped after {self.cycle_count} cycles")


def main() -> int:
    parser = argparse.ArgumentParser(description="Re-run state ingestion on an interval")
    parser.add_argument("--interval", "-i", type=int, default=60, help="Refresh interval in minutes (default: 60)")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--feed", action="store_true", help="Use the RSS feed instead of page scraping")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT_PATH, help="Aggregate JSON file")
    args, extra = parser.parse_known_args()

    if args.interval <= 0:
        logger.error("❌ --interval must be positive")
        return 2

    scheduler = RefreshScheduler(args.interval, feed=args.feed, extra_args=extra, output_path=args.output)
    if args.once:
        ok = scheduler.run_cycle()
        if ok:
            scheduler.log_cycle_summary(1)
        return 0 if ok else 1

    scheduler.install_signal_handlers()
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
