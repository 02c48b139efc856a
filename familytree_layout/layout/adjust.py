"""Post-layout adjustments used by interactive canvases."""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import LayoutConfig, get_layout_config
from ..model import LayoutNode, LayoutResult, PersonId
from .dimensions import calculate_dimensions
from .positioner import union_center

logger = logging.getLogger(__name__)


def center_layout(result: LayoutResult, config: Optional[LayoutConfig] = None) -> LayoutResult:
    """Return a copy centred horizontally on ``x = 0`` with the top row at ``padding``."""

    config = config or get_layout_config()
    centred = copy.deepcopy(result)
    if not centred.nodes:
        return centred

    lefts = np.array([node.x for node in centred.nodes], dtype=float)
    tops = np.array([node.y for node in centred.nodes], dtype=float)
    dx = -(float(lefts.min()) + float(lefts.max()) + config.person_width) / 2
    dy = config.padding - float(tops.min())

    for node in centred.nodes:
        node.x += dx
        node.y += dy
    for marriage in centred.marriages:
        marriage.x += dx
        marriage.y += dy
    centred.dimensions = calculate_dimensions(centred.nodes, centred.marriages, config)
    logger.debug("Centred layout by (%g, %g)", dx, dy)
    return centred


def move_person(
    result: LayoutResult,
    person_id: PersonId,
    x: float,
    y: float,
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """Return a copy with one person dragged to ``(x, y)``; their unions follow."""

    config = config or get_layout_config()
    moved = copy.deepcopy(result)
    node = moved.node(person_id)
    node.x, node.y = float(x), float(y)

    positions = {n.person.id: (n.x, n.y) for n in moved.nodes}
    for marriage in moved.marriages:
        if person_id in marriage.parent_ids:
            marriage.x = union_center(marriage, positions, config.person_width)
    moved.dimensions = calculate_dimensions(moved.nodes, moved.marriages, config)
    return moved


def auto_space(result: LayoutResult, config: Optional[LayoutConfig] = None) -> LayoutResult:
    """Return a copy where crowded rows are spread out to ``min_gap``.

    Each row is scanned left to right; a box closer than ``min_gap`` to its
    left neighbour is pushed right together with everything after it.
    """

    config = config or get_layout_config()
    spaced = copy.deepcopy(result)
    rows: Dict[int, List[LayoutNode]] = defaultdict(list)
    for node in spaced.nodes:
        rows[node.depth].append(node)

    pushed = 0
    for row in rows.values():
        row.sort(key=lambda n: n.x)
        shift = 0.0
        for prev, cur in zip(row, row[1:]):
            cur.x += shift
            gap = cur.x - (prev.x + config.person_width)
            if gap < config.min_gap:
                shift += config.min_gap - gap
                cur.x += config.min_gap - gap
                pushed += 1

    if pushed:
        positions = {n.person.id: (n.x, n.y) for n in spaced.nodes}
        for marriage in spaced.marriages:
            marriage.x = union_center(marriage, positions, config.person_width)
        spaced.dimensions = calculate_dimensions(spaced.nodes, spaced.marriages, config)
    logger.debug("Auto-spacing pushed %d boxes", pushed)
    return spaced


def detect_collisions(
    nodes: Sequence[LayoutNode],
    config: Optional[LayoutConfig] = None,
    buffer: float = 20.0,
) -> List[Tuple[PersonId, PersonId]]:
    """Pairs of people whose boxes, grown by ``buffer``, intersect."""

    config = config or get_layout_config()
    if len(nodes) < 2:
        return []

    xs = np.array([node.x for node in nodes], dtype=float)
    ys = np.array([node.y for node in nodes], dtype=float)
    overlap_x = np.abs(xs[:, None] - xs[None, :]) < config.person_width + buffer
    overlap_y = np.abs(ys[:, None] - ys[None, :]) < config.person_height + buffer
    hits = np.argwhere(np.triu(overlap_x & overlap_y, k=1))
    return [(nodes[i].person.id, nodes[j].person.id) for i, j in hits]
