from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..config import LayoutConfig
from ..logging_utils import apply_debug_logging
from ..model import Dimensions, LayoutNode, Marriage

logger = logging.getLogger(__name__)


def calculate_dimensions(
    nodes: Sequence[LayoutNode], marriages: Sequence[Marriage], config: LayoutConfig
) -> Dimensions:
    """Bounding box of every person box and union point, padded for the viewport."""

    if not nodes and not marriages:
        return Dimensions()

    half_width = config.person_width / 2
    centers_x = np.array(
        [node.x + half_width for node in nodes] + [m.x for m in marriages], dtype=float
    )
    tops_y = np.array([node.y for node in nodes] + [m.y for m in marriages], dtype=float)

    min_x = float(centers_x.min()) - half_width - config.padding
    max_x = float(centers_x.max()) + half_width + config.padding
    min_y = float(tops_y.min()) - config.padding
    max_y = float(tops_y.max()) + config.person_height + config.padding
    return Dimensions(
        min_x=min_x,
        max_x=max_x,
        min_y=min_y,
        max_y=max_y,
        width=max_x - min_x,
        height=max_y - min_y,
    )


apply_debug_logging(globals(), logger=logger)
