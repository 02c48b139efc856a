from __future__ import annotations

import logging
from typing import Dict, Iterable

from ..config import LayoutConfig
from ..logging_utils import apply_debug_logging
from ..model import Marriage, UnionKey

logger = logging.getLogger(__name__)


def calculate_subtree_widths(unions: Iterable[Marriage], config: LayoutConfig) -> Dict[UnionKey, float]:
    """Relative width hint per union, in grid columns, sized by child count.

    Walks the deepest unions first. The positioner does not depend on the
    values; they are exposed on ``Marriage.subtree_width`` for renderers.
    """

    widths: Dict[UnionKey, float] = {}
    ordered = sorted(unions, key=lambda u: (-u.depth, u.key))
    for union in ordered:
        if not union.children:
            continue
        width = max(1.0, len(union.children) * config.child_gap / config.grid_x)
        union.subtree_width = width
        widths[union.key] = width
    logger.debug("Computed subtree widths for %d unions", len(widths))
    return widths


apply_debug_logging(globals(), logger=logger)
