from __future__ import annotations
from typing import Any, List, Mapping, Optional
import logging
import math

from . import config
from .types import Graded, RubricDefinition, ScoreBreakdown, SectionScore, NotApplicable

log = logging.getLogger(__name__)


def round_half_up(x: float) -> int:
    """Nearest integer, halves rounded up (``round`` would round 62.5 to 62)."""
    return int(math.floor(x + 0.5))


def _graded_index(rating: Any) -> Optional[int]:
    if isinstance(rating, Graded) and isinstance(rating.index, int) and not isinstance(rating.index, bool):
        return rating.index
    return None


def score_breakdown(rubric: RubricDefinition, ratings: Mapping[str, Any]) -> ScoreBreakdown:
    """
    Per-section view of the quality score.

    Absent and N/A criteria are skipped entirely. A section only counts once
    one of its criteria is graded and its graded maximum is positive; the
    weights of the remaining sections are renormalized to fill 100%.
    """
    ratings = ratings if isinstance(ratings, Mapping) else {}
    sections: List[SectionScore] = []
    weighted_sum = 0.0
    active_weight = 0

    for section in rubric.sections:
        earned = 0
        max_points = 0
        rated = 0
        na = 0
        for key in section.criteria:
            rating = ratings.get(key)
            idx = _graded_index(rating)
            if idx is None:
                if isinstance(rating, NotApplicable):
                    na += 1
                continue
            crit = rubric.criteria.get(key)
            rated += 1
            if crit is None:
                continue
            earned += crit.points_for(idx)
            max_points += crit.max_points

        s = SectionScore(key=section.key, weight=section.weight, earned=earned,
                         max_points=max_points, rated=rated, not_applicable=na)
        sections.append(s)
        if s.touched:
            weighted_sum += (earned / max_points) * section.weight
            active_weight += section.weight

    score = None if active_weight == 0 else round_half_up(weighted_sum / active_weight * 100)
    known = set(rubric.criterion_keys)
    ignored = tuple(sorted(str(k) for k in ratings if k not in known))

    out = ScoreBreakdown(
        role=rubric.role,
        variant=rubric.variant,
        sections=tuple(sections),
        weighted_sum=weighted_sum,
        active_weight=active_weight,
        score=score,
        ignored_keys=ignored,
    )
    if config.DEBUG_TRACE:
        log.debug(
            "score %s/%s active_weight=%d weighted_sum=%.4f score=%s ignored=%s",
            rubric.role, rubric.variant, active_weight, weighted_sum, score, list(ignored),
        )
    return out


def calculate(rubric: RubricDefinition, ratings: Mapping[str, Any]) -> Optional[int]:
    """
    Returns the quality score 0..100, or None when nothing gradable is rated.
    Never raises; unknown criterion keys are ignored.
    """
    return score_breakdown(rubric, ratings).score


__all__ = ["calculate", "score_breakdown", "round_half_up"]
