"""Topic extraction from rendered trends pages."""

from .cascade import CascadeResult, ExtractionCascade, ExtractionStrategy

__all__ = [
    "CascadeResult",
    "ExtractionCascade",
    "ExtractionStrategy",
]
