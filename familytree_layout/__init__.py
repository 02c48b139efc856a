from .config import BRANCH_COLORS, LayoutConfig, get_layout_config, set_layout_config
from .model import (
    Dimensions,
    LayoutNode,
    LayoutResult,
    Marriage,
    Person,
    Relationship,
    UnionKey,
    person_sort_key,
    union_key,
)
from .layout import (
    FamilyTreeLayoutEngine,
    LayoutViolation,
    auto_space,
    center_layout,
    check_layout,
    detect_collisions,
    generate_layout,
    move_person,
)
from .validator import FamilyValidator, FamilyWarning, validate_family

__all__ = [
    'BRANCH_COLORS',
    'LayoutConfig',
    'get_layout_config',
    'set_layout_config',
    'Dimensions',
    'LayoutNode',
    'LayoutResult',
    'Marriage',
    'Person',
    'Relationship',
    'UnionKey',
    'person_sort_key',
    'union_key',
    'FamilyTreeLayoutEngine',
    'generate_layout',
    'center_layout',
    'move_person',
    'detect_collisions',
    'auto_space',
    'check_layout',
    'LayoutViolation',
    'FamilyValidator',
    'FamilyWarning',
    'validate_family',
]
