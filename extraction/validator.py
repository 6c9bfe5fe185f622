"""Filter UI noise out of raw extraction candidates."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from aggregation_engine.models import RawCandidate, ValidatedTopic

from .field_patterns import UI_NOISE_PHRASES

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 2
MAX_TITLE_LENGTH = 100


def rejection_reason(candidate: RawCandidate, noise_phrases: Iterable[str] = UI_NOISE_PHRASES) -> Optional[str]:
    """Why *candidate* should be dropped, or ``None`` if it is a real topic.

    Rules are applied in order and the first hit wins.
    """
    title = (candidate.title or "").strip()
    if not MIN_TITLE_LENGTH <= len(title) <= MAX_TITLE_LENGTH:
        return "invalid title"

    lower = title.lower()
    if any(phrase in lower for phrase in noise_phrases):
        return "UI element"

    if not candidate.has_volume and not candidate.has_started:
        return "no volume or recency"

    return None


def validate_candidates(
    candidates: Iterable[RawCandidate],
    noise_phrases: Tuple[str, ...] = UI_NOISE_PHRASES,
) -> List[ValidatedTopic]:
    """Keep the candidates that look like real topics, in input order.

    A candidate with only one of volume/recency resolved is kept; it still
    scores, just lower.
    """
    validated: List[ValidatedTopic] = []
    for candidate in candidates:
        reason = rejection_reason(candidate, noise_phrases)
        if reason:
            logger.debug(f"Rejected candidate {candidate.title!r}: {reason}")
            continue
        validated.append(ValidatedTopic(**candidate.model_dump(exclude={"title"}), title=candidate.title.strip()))
    return validated
