from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Set

from ..logging_utils import apply_debug_logging
from ..model import Marriage, Person, PersonId
from .indexer import RelationshipIndex

logger = logging.getLogger(__name__)


def _propagate(root_id: PersonId, color: str, index: RelationshipIndex, colors: Dict[PersonId, str]) -> None:
    visited: Set[PersonId] = set()
    stack: List[PersonId] = [root_id]
    while stack:
        pid = stack.pop()
        if pid in visited:
            continue
        visited.add(pid)
        colors[pid] = color
        for spouse in index.spouses(pid):
            colors.setdefault(spouse, color)
        # reversed so children are visited in recorded order
        stack.extend(reversed(index.children(pid)))


def assign_branch_colors(
    people: Sequence[Person],
    depths: Mapping[PersonId, int],
    index: RelationshipIndex,
    palette: Sequence[str],
) -> Dict[PersonId, str]:
    """Give each top-generation person a palette colour and push it down their line."""

    colors: Dict[PersonId, str] = {}
    roots = [person for person in people if depths.get(person.id, 0) == 0]
    for idx, person in enumerate(roots):
        colors[person.id] = palette[idx % len(palette)]

    for person in roots:
        _propagate(person.id, colors[person.id], index, colors)

    for person in people:
        colors.setdefault(person.id, palette[0])
    logger.info("Assigned branch colours from %d roots", len(roots))
    return colors


def marriage_color(union: Marriage, colors: Mapping[PersonId, str], palette: Sequence[str]) -> str:
    if union.parent_a is not None and union.parent_a.id in colors:
        return colors[union.parent_a.id]
    return palette[0]


apply_debug_logging(globals(), logger=logger)
