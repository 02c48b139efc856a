"""Generation depth assignment by ancestry traversal.

Depths start from a breadth-first walk over the roots of the family graph and
are then raised until every child sits strictly below each of its parents and
spouses share a row. Raising only ever increases a depth, so the result is the
smallest assignment above the traversal that satisfies both constraints. The
repair is bounded by a pass budget so cyclic (malformed) data terminates with a
best-effort assignment instead of looping.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Sequence

from ..logging_utils import apply_debug_logging
from ..model import Marriage, Person, PersonId
from .indexer import RelationshipIndex

logger = logging.getLogger(__name__)


def find_roots(people: Sequence[Person], index: RelationshipIndex) -> List[Person]:
    """People with no recorded parents who are not married into a family that has them."""

    roots = [
        person
        for person in people
        if not index.parents(person.id)
        and not any(index.parents(spouse) for spouse in index.spouses(person.id))
    ]
    if roots or not people:
        return roots

    dated = [person for person in people if person.birth_year is not None]
    if dated:
        oldest = min(dated, key=lambda p: p.birth_year)
        logger.info("No root ancestors found; starting from oldest person %r", oldest.id)
        return [oldest]
    logger.info("No root ancestors or birth years; starting from %r", people[0].id)
    return [people[0]]


def _walk_generations(
    people: Sequence[Person], roots: Iterable[Person], index: RelationshipIndex
) -> Dict[PersonId, int]:
    depths: Dict[PersonId, int] = {}
    queue: Deque[PersonId] = deque()
    for root in roots:
        if root.id not in depths:
            depths[root.id] = 0
            queue.append(root.id)

    while queue:
        pid = queue.popleft()
        depth = depths[pid]
        for spouse in index.spouses(pid):
            if spouse not in depths:
                depths[spouse] = depth
                queue.append(spouse)
        for child in index.children(pid):
            if child not in depths:
                depths[child] = depth + 1
                queue.append(child)

    orphans = 0
    for person in people:
        if person.id not in depths:
            depths[person.id] = 0
            orphans += 1
    if orphans:
        logger.debug("%d people unreachable from roots placed at depth 0", orphans)
    return depths


def _repair_parent_order(
    people: Sequence[Person], index: RelationshipIndex, depths: Dict[PersonId, int]
) -> bool:
    changed = False
    for person in people:
        parents = index.parents(person.id)
        if not parents:
            continue
        deepest = max(depths[pid] for pid in parents)
        if depths[person.id] <= deepest:
            depths[person.id] = deepest + 1
            changed = True
    return changed


def _align_spouses(index: RelationshipIndex, depths: Dict[PersonId, int]) -> bool:
    changed = False
    for a, b in index.explicit_pairs:
        shared = max(depths[a], depths[b])
        if depths[a] != shared or depths[b] != shared:
            depths[a] = depths[b] = shared
            changed = True
    return changed


def assign_depths(
    people: Sequence[Person],
    index: RelationshipIndex,
    max_passes: Optional[int] = None,
) -> Dict[PersonId, int]:
    """Return ``person id -> generation`` with 0 for the oldest generation."""

    if not people:
        return {}

    roots = find_roots(people, index)
    depths = _walk_generations(people, roots, index)

    budget = max_passes if max_passes is not None else 2 * len(people) + 2
    passes = 0
    converged = False
    while passes < budget:
        passes += 1
        changed = _repair_parent_order(people, index, depths)
        changed = _align_spouses(index, depths) or changed
        if not changed:
            converged = True
            break
    if not converged:
        logger.warning(
            "Depth repair did not settle after %d passes (cyclic relationships?); "
            "keeping best-effort depths",
            passes,
        )

    shallowest = min(depths.values())
    if shallowest:
        for pid in depths:
            depths[pid] -= shallowest

    logger.info(
        "Assigned %d generations to %d people from %d roots in %d repair passes",
        max(depths.values()) + 1,
        len(depths),
        len(roots),
        passes,
    )
    return depths


def assign_marriage_depths(unions: Iterable[Marriage], depths: Dict[PersonId, int]) -> None:
    """A union sits on the row of its shallowest parent."""

    for union in unions:
        parent_depths = [depths[pid] for pid in union.parent_ids if pid in depths]
        union.depth = min(parent_depths) if parent_depths else 0


apply_debug_logging(globals(), logger=logger)
