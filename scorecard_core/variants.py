from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .catalog import RubricCatalog
from .types import ScorecardState

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantResolution:
    role: str
    variant: Optional[str]
    requires_acknowledgement: bool = False
    locked: bool = False
    auto_scorable: bool = False


def resolve_variant(
    catalog: RubricCatalog,
    role: str,
    requested: Optional[str] = None,
    persisted: Optional[str] = None,
) -> VariantResolution:
    """
    Effective rubric variant for ``role``.

    A variant already carried by the ticket wins and is locked; otherwise a
    declared ``requested`` variant is used; otherwise the role's default, or
    the first declared variant flagged for explicit acknowledgement.
    """
    declared = catalog.variants_for(role)
    if not declared:
        return VariantResolution(
            role=role,
            variant=None,
            auto_scorable=catalog.lookup(role) is not None,
        )

    if persisted is not None and persisted not in declared:
        log.warning("Ignoring unknown persisted variant %r for role %r", persisted, role)
        persisted = None
    if requested is not None and requested not in declared:
        log.warning("Ignoring unknown requested variant %r for role %r", requested, role)
        requested = None

    if persisted is not None:
        if requested is not None and requested != persisted:
            log.info("Variant %r is fixed for this ticket; ignoring %r", persisted, requested)
        return VariantResolution(role=role, variant=persisted, locked=True,
                                 auto_scorable=catalog.lookup(role, persisted) is not None)

    if requested is not None:
        return VariantResolution(role=role, variant=requested,
                                 auto_scorable=catalog.lookup(role, requested) is not None)

    default = catalog.default_variant(role)
    if default is not None:
        return VariantResolution(role=role, variant=default,
                                 auto_scorable=catalog.lookup(role, default) is not None)

    first = declared[0]
    return VariantResolution(
        role=role,
        variant=first,
        requires_acknowledgement=catalog.requires_variant_selection(role),
        auto_scorable=catalog.lookup(role, first) is not None,
    )


def switch_variant(state: ScorecardState, variant: Optional[str]) -> ScorecardState:
    """
    Move ``state`` to ``variant``. Ratings never outlive their variant: any
    change clears the rating set and the computed score. Either way the
    variant counts as chosen by the grader.
    """
    if variant == state.variant:
        if state.requires_acknowledgement:
            return replace(state, requires_acknowledgement=False)
        return state
    return replace(state, variant=variant, ratings={}, score=None, requires_acknowledgement=False)


__all__ = ["VariantResolution", "resolve_variant", "switch_variant"]
