# pylint: disable=missing-module-docstring
# ruff: noqa

from pathlib import Path

from setuptools import find_packages, setup


def read_long_description() -> str:
    """Return README contents for PyPI description."""
    readme_path = Path(__file__).with_name("README.md")
    return readme_path.read_text(encoding="utf-8") if readme_path.exists() else "StateMap Trends"


setup(
    name="statemap-trends",
    version="0.1.0",
    description="Per-state Google Trends law & government topic ingestion",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    python_requires=">=3.11",
    packages=find_packages(
        include=[
            "statemap_engine", "statemap_engine.*",
            "fetchers", "fetchers.*",
            "extraction", "extraction.*",
            "aggregation_engine", "aggregation_engine.*",
        ]
    ),
    include_package_data=True,
    install_requires=[
        "pandas>=2.0",
        "httpx>=0.26",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "apify-client>=1.6",
        "beautifulsoup4>=4.12",
        "feedparser>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "statemap-ingest = statemap_engine.cli_entrypoints:ingest",
            "statemap-ingest-feed = statemap_engine.cli_entrypoints:ingest_feed",
            "statemap-backfill-leaning = statemap_engine.cli_entrypoints:backfill_leaning",
            "statemap-refresh = statemap_engine.cli_entrypoints:refresh",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
