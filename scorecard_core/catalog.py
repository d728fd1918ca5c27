"""Read-only registry of scorecard rubrics keyed by (role, variant).

The catalog is built once from the rubric tables (see ``rubrics.py``) and
validated at construction; lookups never raise. A role that is not in the
catalog is graded manually.
"""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .rubrics import load_rubric_tables
from .types import Criterion, RoleEntry, RubricDefinition, Section, VariantSpec

log = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Rubric tables are malformed; raised while building the catalog."""


def _as_str_tuple(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(str(x) for x in raw)


def _build_criterion(where: str, data: Mapping[str, Any]) -> Criterion:
    key = data.get("key")
    if not isinstance(key, str) or not key:
        raise CatalogError(f"{where}: criterion without key")
    points = data.get("points")
    if not isinstance(points, (list, tuple)) or not points:
        raise CatalogError(f"{where}: criterion '{key}' has an empty point table")
    if any(isinstance(p, bool) or not isinstance(p, int) for p in points):
        raise CatalogError(f"{where}: criterion '{key}' has non-integer points {points!r}")
    options = _as_str_tuple(data.get("options"))
    if options and len(options) != len(points):
        raise CatalogError(
            f"{where}: criterion '{key}' has {len(options)} option labels for {len(points)} point values"
        )
    return Criterion(
        key=key,
        points=tuple(points),
        label=str(data.get("label") or key),
        short_label=str(data.get("short_label") or data.get("label") or key),
        options=options,
        na_label=str(data.get("na_label") or "N/A"),
    )


def _build_section(where: str, data: Mapping[str, Any]) -> Section:
    key = data.get("key")
    if not isinstance(key, str) or not key:
        raise CatalogError(f"{where}: section without key")
    weight = data.get("weight")
    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
        raise CatalogError(f"{where}: section '{key}' needs a non-negative integer weight, got {weight!r}")
    criteria = _as_str_tuple(data.get("criteria"))
    if not criteria:
        raise CatalogError(f"{where}: section '{key}' has no criteria")
    return Section(key=key, weight=weight, criteria=criteria, label=str(data.get("label") or key))


def _build_rubric(
    role: str, variant: str, data: Mapping[str, Any], categories: tuple[str, ...]
) -> RubricDefinition:
    where = f"{role}/{variant}"
    criteria: Dict[str, Criterion] = {}
    for raw in data.get("criteria") or []:
        crit = _build_criterion(where, raw)
        if crit.key in criteria:
            raise CatalogError(f"{where}: duplicate criterion '{crit.key}'")
        criteria[crit.key] = crit

    sections: List[Section] = []
    seen: set[str] = set()
    for raw in data.get("sections") or []:
        section = _build_section(where, raw)
        if section.key in seen:
            raise CatalogError(f"{where}: duplicate section '{section.key}'")
        seen.add(section.key)
        for key in section.criteria:
            if key not in criteria:
                raise CatalogError(f"{where}: section '{section.key}' references criterion '{key}' without a point table")
        sections.append(section)
    if not sections:
        raise CatalogError(f"{where}: rubric has no sections")

    return RubricDefinition(
        role=role,
        variant=variant,
        sections=tuple(sections),
        criteria=MappingProxyType(criteria),
        label=str(data.get("label") or where),
        categories=categories,
    )


def _build_role(role: str, data: Mapping[str, Any]) -> RoleEntry:
    categories = _as_str_tuple(data.get("categories"))
    raw_rubrics = data.get("rubrics") or {}
    if not isinstance(raw_rubrics, Mapping) or not raw_rubrics:
        raise CatalogError(f"{role}: no rubrics defined")
    rubrics = {
        str(variant): _build_rubric(role, str(variant), body, categories)
        for variant, body in raw_rubrics.items()
    }

    variants: List[VariantSpec] = []
    for raw in data.get("variants") or []:
        if isinstance(raw, Mapping):
            spec = VariantSpec(key=str(raw.get("key")), label=str(raw.get("label") or raw.get("key")))
        else:
            spec = VariantSpec(key=str(raw), label=str(raw))
        if spec.key not in rubrics:
            raise CatalogError(f"{role}: declared variant '{spec.key}' has no rubric")
        variants.append(spec)

    default = data.get("default_variant")
    if default is not None and str(default) not in rubrics:
        raise CatalogError(f"{role}: default variant '{default}' has no rubric")
    if default is None and not variants:
        raise CatalogError(f"{role}: needs either a default variant or declared variants")

    return RoleEntry(
        role=role,
        variants=tuple(variants),
        default_variant=None if default is None else str(default),
        rubrics=MappingProxyType(rubrics),
        categories=categories,
    )


class RubricCatalog:
    """Immutable (role, variant) -> RubricDefinition registry."""

    def __init__(self, entries: Mapping[str, RoleEntry], version: str = ""):
        self._entries: Mapping[str, RoleEntry] = MappingProxyType(dict(entries))
        self.version = version

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RubricCatalog":
        roles = data.get("roles")
        if not isinstance(roles, Mapping):
            raise CatalogError("rubric tables need a 'roles' mapping")
        entries = {str(role): _build_role(str(role), body) for role, body in roles.items()}
        return cls(entries, version=str(data.get("version") or ""))

    @classmethod
    def load(cls, path: str | Path | None = None) -> "RubricCatalog":
        catalog = cls.from_dict(load_rubric_tables(path))
        log.info("Loaded rubric catalog %s with roles: %s", catalog.version or "-", ", ".join(catalog.roles()))
        return catalog

    # -- contract ---------------------------------------------------------
    def lookup(self, role: str, variant: Optional[str] = None) -> Optional[RubricDefinition]:
        entry = self._entries.get(role)
        if entry is None:
            return None
        key = variant if variant is not None else entry.default_variant
        if key is None:
            return None
        return entry.rubrics.get(key)

    def variants_for(self, role: str) -> List[str]:
        entry = self._entries.get(role)
        return entry.variant_keys if entry else []

    def requires_variant_selection(self, role: str) -> bool:
        entry = self._entries.get(role)
        if entry is None:
            return False
        return bool(entry.variants) and entry.default_variant is None

    # -- helpers ----------------------------------------------------------
    def roles(self) -> List[str]:
        return list(self._entries)

    def has_scorecard(self, role: str) -> bool:
        return role in self._entries

    def role_entry(self, role: str) -> Optional[RoleEntry]:
        return self._entries.get(role)

    def default_variant(self, role: str) -> Optional[str]:
        entry = self._entries.get(role)
        return entry.default_variant if entry else None

    def variant_labels(self, role: str) -> Dict[str, str]:
        entry = self._entries.get(role)
        return {v.key: v.label for v in entry.variants} if entry else {}

    def categories_for(self, role: str) -> List[str]:
        entry = self._entries.get(role)
        return list(entry.categories) if entry else []

    def rubrics(self) -> Iterator[RubricDefinition]:
        for entry in self._entries.values():
            yield from entry.rubrics.values()

    def describe_role(self, role: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(role)
        if entry is None:
            return None
        return {
            "role": role,
            "variants": [{"key": v.key, "label": v.label} for v in entry.variants],
            "default_variant": entry.default_variant,
            "requires_variant_selection": self.requires_variant_selection(role),
            "categories": list(entry.categories),
        }


def rubric_to_dict(rubric: RubricDefinition) -> Dict[str, Any]:
    return {
        "role": rubric.role,
        "variant": rubric.variant,
        "label": rubric.label,
        "max_points": rubric.max_points,
        "total_weight": rubric.total_weight,
        "sections": [
            {
                "key": s.key,
                "label": s.label,
                "weight": s.weight,
                "criteria": [
                    {
                        "key": c.key,
                        "label": c.label,
                        "short_label": c.short_label,
                        "points": list(c.points),
                        "options": list(c.options),
                        "na_label": c.na_label,
                    }
                    for c in (rubric.criterion(k) for k in s.criteria)
                    if c is not None
                ],
            }
            for s in rubric.sections
        ],
    }


__all__ = ["CatalogError", "RubricCatalog", "rubric_to_dict"]
