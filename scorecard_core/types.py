from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Graded:
    """A selected option; ``index`` points into ``Criterion.points``."""
    index: int


@dataclass(frozen=True)
class NotApplicable:
    """Rating meaning "does not apply to this ticket"."""


NA = NotApplicable()
Rating = Union[Graded, NotApplicable]
RatingSet = Mapping[str, Rating]


@dataclass(frozen=True)
class Criterion:
    key: str
    points: Tuple[int, ...]
    label: str = ""
    short_label: str = ""
    options: Tuple[str, ...] = ()
    na_label: str = "N/A"

    @property
    def max_points(self) -> int:
        return self.points[0] if self.points else 0

    def points_for(self, index: int) -> int:
        if 0 <= index < len(self.points):
            return self.points[index]
        return 0


@dataclass(frozen=True)
class Section:
    key: str
    weight: int
    criteria: Tuple[str, ...]
    label: str = ""


@dataclass(frozen=True)
class RubricDefinition:
    role: str
    variant: Optional[str]
    sections: Tuple[Section, ...]
    criteria: Mapping[str, Criterion] = field(default_factory=lambda: MappingProxyType({}))
    label: str = ""
    categories: Tuple[str, ...] = ()

    @property
    def criterion_keys(self) -> Tuple[str, ...]:
        return tuple(key for section in self.sections for key in section.criteria)

    @property
    def max_points(self) -> int:
        return sum(self.criteria[key].max_points for key in self.criterion_keys if key in self.criteria)

    @property
    def total_weight(self) -> int:
        return sum(section.weight for section in self.sections)

    def criterion(self, key: str) -> Optional[Criterion]:
        return self.criteria.get(key)


@dataclass(frozen=True)
class VariantSpec:
    key: str
    label: str = ""


@dataclass(frozen=True)
class RoleEntry:
    role: str
    variants: Tuple[VariantSpec, ...]
    default_variant: Optional[str]
    rubrics: Mapping[str, RubricDefinition]
    categories: Tuple[str, ...] = ()

    @property
    def variant_keys(self) -> List[str]:
        return [v.key for v in self.variants]


@dataclass(frozen=True)
class SectionScore:
    key: str
    weight: int
    earned: int = 0
    max_points: int = 0
    rated: int = 0
    not_applicable: int = 0

    @property
    def touched(self) -> bool:
        return self.rated > 0 and self.max_points > 0

    @property
    def ratio(self) -> Optional[float]:
        if not self.touched:
            return None
        return self.earned / self.max_points


@dataclass(frozen=True)
class ScoreBreakdown:
    role: str
    variant: Optional[str]
    sections: Tuple[SectionScore, ...]
    weighted_sum: float
    active_weight: int
    score: Optional[int]
    ignored_keys: Tuple[str, ...] = ()

    def rows(self) -> List[Dict[str, object]]:
        out: List[Dict[str, object]] = []
        for s in self.sections:
            out.append({
                "role": self.role,
                "variant": self.variant,
                "section": s.key,
                "weight": s.weight,
                "earned": s.earned,
                "max_points": s.max_points,
                "ratio": s.ratio,
                "touched": s.touched,
                "rated": s.rated,
                "not_applicable": s.not_applicable,
            })
        return out


@dataclass(frozen=True)
class ScorecardState:
    """Scorecard fields of one ticket under grading (owned by a single session)."""
    role: str
    variant: Optional[str] = None
    ratings: Mapping[str, Rating] = field(default_factory=dict)
    score: Optional[int] = None
    variant_locked: bool = False
    # variant was picked by default, not by the grader; scores are withheld until confirmed
    requires_acknowledgement: bool = False
