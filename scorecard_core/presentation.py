"""Cosmetic option styling for scorecard editors.

Keyed only by option index; it knows nothing about criteria or rubrics and
is handed to whatever renders the editor.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .types import Graded, NotApplicable, Rating


@dataclass(frozen=True)
class OptionStyle:
    short_label: str
    bg: str
    bg_light: str
    border: str
    text: str
    text_dark: str
    hex: str


@dataclass(frozen=True)
class OptionTable:
    graded: Mapping[int, OptionStyle]
    not_applicable: OptionStyle
    fallback: OptionStyle

    def style_for(self, rating: Optional[Rating]) -> Optional[OptionStyle]:
        if rating is None:
            return None
        if isinstance(rating, NotApplicable):
            return self.not_applicable
        if isinstance(rating, Graded):
            return self.graded.get(rating.index, self.fallback)
        return None

    def short_label(self, rating: Optional[Rating]) -> str:
        style = self.style_for(rating)
        return style.short_label if style else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "graded": {str(i): vars(s) for i, s in sorted(self.graded.items())},
            "not_applicable": vars(self.not_applicable),
        }


_NA_STYLE = OptionStyle("N/A", "bg-gray-400", "bg-gray-100", "border-gray-400", "text-white", "text-gray-600", "#9ca3af")

DEFAULT_OPTION_TABLE = OptionTable(
    graded=MappingProxyType({
        0: OptionStyle("Best", "bg-green-500", "bg-green-100", "border-green-500", "text-white", "text-green-700", "#22c55e"),
        1: OptionStyle("Good", "bg-yellow-400", "bg-yellow-100", "border-yellow-400", "text-gray-900", "text-yellow-700", "#facc15"),
        2: OptionStyle("Coach", "bg-amber-500", "bg-amber-100", "border-amber-500", "text-white", "text-amber-700", "#f59e0b"),
        3: OptionStyle("Improve", "bg-red-500", "bg-red-100", "border-red-500", "text-white", "text-red-700", "#ef4444"),
    }),
    not_applicable=_NA_STYLE,
    fallback=_NA_STYLE,
)
