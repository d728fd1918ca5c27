# scorecard_core/policy.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional
import logging

from . import config
from .catalog import RubricCatalog
from .ratings import best_ratings, parse_ratings
from .scoring import calculate
from .types import Rating, RubricDefinition, ScorecardState
from .variants import resolve_variant, switch_variant as _switch_variant

log = logging.getLogger(__name__)

GRADED = "graded"
UNGRADED = "ungraded"


class ManualScoreError(ValueError):
    """Manual score rejected: out of range, or the role is auto-scored."""


class VariantLockedError(ValueError):
    """The ticket's variant is fixed once grading has begun."""


@dataclass(frozen=True)
class ScorecardTemplate:
    """Reusable rating sets stored on a macro, keyed by role."""
    name: str
    scorecard_data: Mapping[str, Mapping[str, Any]]

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ScorecardTemplate":
        return ScorecardTemplate(
            name=str(data.get("name") or ""),
            scorecard_data=dict(data.get("scorecardData") or data.get("scorecard_data") or {}),
        )

    def for_role(self, role: str) -> Optional[Mapping[str, Any]]:
        entry = self.scorecard_data.get(role)
        if not isinstance(entry, Mapping) or not entry.get("values"):
            return None
        return entry


class ReconciliationPolicy:
    """
    Decides when the computed score overwrites the ticket's score field.

    Auto-scorable (role, variant) pairs have their score recomputed on every
    rating change, including overwriting with None while nothing is rated.
    Roles without a rubric keep an operator-entered score and never reach
    the calculator.
    """

    def __init__(self, catalog: RubricCatalog):
        self.catalog = catalog

    def rubric_for(self, state: ScorecardState) -> Optional[RubricDefinition]:
        return self.catalog.lookup(state.role, state.variant)

    def is_auto_scorable(self, role: str, variant: Optional[str] = None) -> bool:
        return self.catalog.lookup(role, variant) is not None

    def start(self, role: str, variant: Optional[str] = None, persisted_variant: Optional[str] = None) -> ScorecardState:
        res = resolve_variant(self.catalog, role, requested=variant, persisted=persisted_variant)
        return ScorecardState(
            role=role,
            variant=res.variant,
            ratings={},
            score=None,
            variant_locked=res.locked,
            requires_acknowledgement=res.requires_acknowledgement,
        )

    def _recompute(self, state: ScorecardState) -> ScorecardState:
        rubric = self.rubric_for(state)
        if rubric is None:
            return state
        if state.requires_acknowledgement:
            return replace(state, score=None)
        return replace(state, score=calculate(rubric, state.ratings))

    def apply_rating(self, state: ScorecardState, key: str, rating: Optional[Rating]) -> ScorecardState:
        ratings: Dict[str, Rating] = dict(state.ratings)
        if rating is None:
            ratings.pop(key, None)
        else:
            ratings[key] = rating
        return self._recompute(replace(state, ratings=ratings))

    def replace_ratings(self, state: ScorecardState, ratings: Mapping[str, Rating]) -> ScorecardState:
        return self._recompute(replace(state, ratings=dict(ratings)))

    def fill_best(self, state: ScorecardState) -> ScorecardState:
        rubric = self.rubric_for(state)
        if rubric is None:
            return state
        return self.replace_ratings(state, best_ratings(rubric))

    def switch_variant(self, state: ScorecardState, variant: Optional[str], *, force: bool = False) -> ScorecardState:
        """
        Explicit variant choice. Choosing the variant already in effect only
        confirms it, keeping the ratings; any other choice clears them.
        """
        if variant == state.variant:
            if state.requires_acknowledgement:
                return self._recompute(replace(state, requires_acknowledgement=False))
            return state
        if state.variant_locked and not force:
            raise VariantLockedError(f"variant {state.variant!r} is fixed for this ticket")
        if variant is not None and variant not in self.catalog.variants_for(state.role):
            raise ValueError(f"unknown variant {variant!r} for role {state.role!r}")
        return self._recompute(replace(_switch_variant(state, variant), variant_locked=False,
                                      requires_acknowledgement=False))

    def apply_template(self, state: ScorecardState, template: ScorecardTemplate) -> ScorecardState:
        """Copy the template's rating set for the ticket's role verbatim, then rescore."""
        entry = template.for_role(state.role)
        if entry is None:
            log.warning("Template %r has no scorecard values for role %r", template.name, state.role)
            return state
        target = entry.get("variant")
        if not self.catalog.variants_for(state.role) and target == self.catalog.default_variant(state.role):
            # roles with one implicit rubric store their default key
            target = None
        if target is not None:
            state = self.switch_variant(state, target)
        return self.replace_ratings(state, parse_ratings(entry.get("values") or {}, legacy=True))

    def set_manual_score(self, state: ScorecardState, value: Any) -> ScorecardState:
        if self.rubric_for(state) is not None:
            raise ManualScoreError(f"{state.role} is scored from its scorecard; manual entry is disabled")
        if value is None:
            return replace(state, score=None)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ManualScoreError(f"manual score must be an integer, got {value!r}")
        if not config.MANUAL_SCORE_MIN <= value <= config.MANUAL_SCORE_MAX:
            raise ManualScoreError(
                f"manual score must be within {config.MANUAL_SCORE_MIN}..{config.MANUAL_SCORE_MAX}, got {value}"
            )
        return replace(state, score=value)


def grading_status(state: ScorecardState) -> str:
    return GRADED if state.score is not None else UNGRADED


__all__ = [
    "GRADED",
    "UNGRADED",
    "ManualScoreError",
    "VariantLockedError",
    "ScorecardTemplate",
    "ReconciliationPolicy",
    "grading_status",
]
