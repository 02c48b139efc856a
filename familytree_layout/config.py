"""Layout configuration and the process-wide default."""

from __future__ import annotations

import copy
import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

BRANCH_COLORS: Tuple[str, ...] = (
    "#3B82F6",
    "#10B981",
    "#F97316",
    "#8B5CF6",
    "#14B8A6",
    "#EF4444",
    "#EAB308",
    "#EC4899",
    "#6366F1",
    "#84CC16",
)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class LayoutConfig:
    """Spacing constants for the layout engine, in canvas units."""

    person_width: float = 160
    person_height: float = 100
    grid_x: float = 220
    grid_y: float = 170
    spouse_gap: float = 40
    sibling_gap: float = 40
    # centre-to-centre; raised to person_width + min_gap by sibling_pitch
    child_gap: float = 180
    padding: float = 100
    min_gap: float = 40
    palette: Tuple[str, ...] = BRANCH_COLORS
    max_repair_passes: Optional[int] = None

    @property
    def sibling_pitch(self) -> float:
        """Centre-to-centre distance between free siblings.

        With the defaults this is 200, not ``child_gap``: 180 would leave
        only 20 units between boxes.
        """

        return max(self.child_gap, self.person_width + self.min_gap)

    @property
    def unit_gap(self) -> float:
        """Edge-to-edge distance between neighbouring units in a row."""

        return max(self.sibling_gap, self.min_gap)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LayoutConfig":
        """Build a config from snake_case or camelCase keys (``personWidth``)."""

        return cls().replace(**values)

    def replace(self, **overrides: Any) -> "LayoutConfig":
        names = {f.name for f in dataclasses.fields(self)}
        normalized: Dict[str, Any] = {}
        for key, value in overrides.items():
            name = key if key in names else _CAMEL_RE.sub("_", key).lower()
            if name not in names:
                raise ValueError(f"Unknown layout config option '{key}'")
            if name == "palette":
                value = tuple(value)
                if not value:
                    raise ValueError("palette needs at least one colour")
            normalized[name] = value
        return dataclasses.replace(self, **normalized)

    def to_dict(self) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        data["palette"] = list(self.palette)
        return data


_LAYOUT_CONFIG = LayoutConfig()


def get_layout_config() -> LayoutConfig:
    return copy.deepcopy(_LAYOUT_CONFIG)


def set_layout_config(config: LayoutConfig) -> None:
    global _LAYOUT_CONFIG
    _LAYOUT_CONFIG = copy.deepcopy(config)


__all__ = [
    "BRANCH_COLORS",
    "LayoutConfig",
    "get_layout_config",
    "set_layout_config",
]
