"""Layout façade: relationship indexing through to positioned nodes."""

from __future__ import annotations

from .adjust import auto_space, center_layout, detect_collisions, move_person
from .checks import LayoutViolation, check_layout
from .colors import assign_branch_colors
from .depths import assign_depths, assign_marriage_depths, find_roots
from .dimensions import calculate_dimensions
from .engine import FamilyTreeLayoutEngine, coerce_people, coerce_relationships, generate_layout
from .indexer import RelationshipIndex, build_index
from .positioner import position_people
from .widths import calculate_subtree_widths

__all__ = [
    "FamilyTreeLayoutEngine",
    "LayoutViolation",
    "RelationshipIndex",
    "assign_branch_colors",
    "auto_space",
    "assign_depths",
    "assign_marriage_depths",
    "build_index",
    "calculate_dimensions",
    "calculate_subtree_widths",
    "center_layout",
    "check_layout",
    "coerce_people",
    "coerce_relationships",
    "detect_collisions",
    "find_roots",
    "generate_layout",
    "move_person",
    "position_people",
]
