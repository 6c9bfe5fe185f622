"""Runtime settings for the ingestion pipeline.

Values come from ``STATEMAP_*`` environment variables (a local ``.env`` file is
loaded first) and may be overridden by command-line flags.  Validation happens
once, up-front, so a bad value aborts the run before any region is touched.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationInvalid

logger = logging.getLogger(__name__)

ENV_PREFIX = "STATEMAP_"

DEFAULT_OUTPUT_PATH = Path("public") / "data" / "states-topics.json"


class IngestSettings(BaseModel):
    """Validated configuration consumed by the batch runner."""

    concurrency: int = Field(5, gt=0, description="Maximum regions processed at once")
    region_timeout_ms: int = Field(60_000, gt=0, description="Per-region content timeout")
    region_delay_ms: int = Field(5_000, ge=0, description="Pause after each region")
    top_n: int = Field(10, gt=0, description="Topics kept per region")
    min_relevance_score: int = Field(40, ge=0, le=100, description="Relevance floor for retention")
    output_path: Path = Field(DEFAULT_OUTPUT_PATH, description="Aggregate store location")
    source: Literal["apify", "http", "fixture"] = "apify"
    fixture_dir: Optional[Path] = None
    apify_token: Optional[str] = None
    apify_actor: str = "apify/playwright-scraper"
    trends_category: int = Field(10, ge=0, description="Google Trends category id")
    topic_category: str = "Law and Government"

    model_config = {
        "frozen": True,
    }

    @property
    def region_timeout_s(self) -> float:
        return self.region_timeout_ms / 1000

    @property
    def region_delay_s(self) -> float:
        return self.region_delay_ms / 1000


def _env_values() -> Dict[str, Any]:
    """Collect ``STATEMAP_*`` variables that map onto settings fields."""
    values: Dict[str, Any] = {}
    for name in IngestSettings.model_fields:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip() != "":
            values[name] = raw.strip()

    # Apify's own variable name is honoured as well
    if "apify_token" not in values and os.getenv("APIFY_TOKEN"):
        values["apify_token"] = os.getenv("APIFY_TOKEN")
    return values


def load_settings(**overrides: Any) -> IngestSettings:
    """Build :class:`IngestSettings` from the environment plus *overrides*.

    ``None`` overrides are ignored so argparse defaults can be passed through
    untouched.

    Raises
    ------
    ConfigurationInvalid
        If any value fails validation, or the chosen source lacks what it
        needs (an Apify token, a fixture directory).
    """
    load_dotenv()

    values = _env_values()
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        settings = IngestSettings(**values)
    except ValidationError as exc:
        raise ConfigurationInvalid(f"Invalid configuration: {exc}") from exc

    if settings.source == "fixture" and settings.fixture_dir is None:
        raise ConfigurationInvalid("source=fixture requires STATEMAP_FIXTURE_DIR (or --fixture-dir)")
    if settings.source == "apify" and not settings.apify_token:
        raise ConfigurationInvalid("source=apify requires APIFY_TOKEN")

    logger.debug("Loaded settings: %s", settings.model_dump(exclude={"apify_token"}))
    return settings
