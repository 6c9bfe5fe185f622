"""Error taxonomy for the ingestion pipeline.

Only :class:`ConfigurationInvalid` is fatal; every other error is scoped to a
single region (or to the persisted store) and is recorded in the run summary.
"""
from __future__ import annotations


class IngestionError(Exception):
    """Base class for all pipeline errors."""

    kind = "error"


class SourceUnavailable(IngestionError):
    """The content source returned nothing for a region within its timeout."""

    kind = "source_unavailable"


class ExtractionExhausted(IngestionError):
    """Every extraction strategy came back empty."""

    kind = "extraction_exhausted"


class ValidationRejectedAll(IngestionError):
    """Candidates were extracted but none survived validation."""

    kind = "validation_rejected_all"


class MalformedPersistedStore(IngestionError):
    """The aggregate file on disk could not be read or parsed."""

    kind = "malformed_store"


class ConfigurationInvalid(IngestionError):
    """Settings failed validation; raised before any region is processed."""

    kind = "configuration_invalid"
