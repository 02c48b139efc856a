"""Row-by-row placement of people and unions.

Every generation row is cut into units: a spouse pair, a single parent, or a
standalone person. Units are packed left to right from the padding. Once all
rows have a place, children who are not tied to a spouse are pulled under the
union they descend from, one row at a time from the top, and each row is swept
once more so nothing ends up closer than ``min_gap``.

Positions are the top-left corner of a person box. Union positions are centres.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from ..config import LayoutConfig
from ..logging_utils import apply_debug_logging
from ..model import Marriage, Person, PersonId, person_sort_key

logger = logging.getLogger(__name__)

Position = Tuple[float, float]


@dataclass(eq=False)
class _Unit:
    members: List[Person]
    step: float
    anchored: bool = False
    left: float = 0.0

    def width(self, person_width: float) -> float:
        return (len(self.members) - 1) * self.step + person_width

    def place(self, positions: Dict[PersonId, Position], y: float) -> None:
        for idx, person in enumerate(self.members):
            positions[person.id] = (self.left + idx * self.step, y)


@dataclass
class _RowPlan:
    depth: int
    people: List[Person] = field(default_factory=list)
    units: List[_Unit] = field(default_factory=list)


def union_sort_key(union: Marriage, row_ids: Set[PersonId]) -> Tuple[bool, int, str, Tuple[str, ...]]:
    participants = sorted((p for p in union.parents if p.id in row_ids), key=person_sort_key)
    years = [p.birth_year for p in participants if p.birth_year is not None]
    earliest = min(years) if years else None
    names = "".join(p.full_name for p in participants)
    return (earliest is None, earliest if earliest is not None else 0, names, union.key)


def _resolve_overlaps(units: Sequence[_Unit], gap: float, person_width: float) -> int:
    shifted = 0
    for prev, cur in zip(units, units[1:]):
        need = prev.left + prev.width(person_width) + gap - cur.left
        if need > 0:
            cur.left += need
            shifted += 1
    return shifted


def _build_row_units(row: _RowPlan, unions: Iterable[Marriage], config: LayoutConfig) -> None:
    row_ids = {p.id for p in row.people}
    row_unions = [
        u for u in unions if u.depth == row.depth and any(p.id in row_ids for p in u.parents)
    ]
    row_unions.sort(key=lambda u: union_sort_key(u, row_ids))

    pair_step = config.person_width + config.spouse_gap
    unit_of: Dict[PersonId, _Unit] = {}
    for union in row_unions:
        present = [p for p in union.parents if p.id in row_ids]
        free = sorted((p for p in present if p.id not in unit_of), key=person_sort_key)
        if not free:
            continue
        partner = next((p for p in present if p.id in unit_of), None)
        if len(free) > 1:
            unit = _Unit(free, pair_step, anchored=True)
            row.units.append(unit)
        elif partner is not None:
            # second union of an already placed person: sit right next to them
            unit = _Unit(free, pair_step, anchored=True)
            row.units.insert(row.units.index(unit_of[partner.id]) + 1, unit)
        else:
            unit = _Unit(free, pair_step)
            row.units.append(unit)
        for person in free:
            unit_of[person.id] = unit

    for person in sorted(row.people, key=person_sort_key):
        if person.id not in unit_of:
            unit = _Unit([person], pair_step)
            row.units.append(unit)
            unit_of[person.id] = unit


def _pack_row(row: _RowPlan, config: LayoutConfig) -> None:
    cursor = config.padding
    for unit in row.units:
        unit.left = cursor
        cursor += unit.width(config.person_width) + config.unit_gap
    _resolve_overlaps(row.units, config.unit_gap, config.person_width)


def union_center(union: Marriage, positions: Mapping[PersonId, Position], person_width: float) -> float:
    centers = [positions[pid][0] + person_width / 2 for pid in union.parent_ids if pid in positions]
    if not centers:
        return union.x
    return sum(centers) / len(centers)


def _sibling_unit(children: List[Person], center: float, config: LayoutConfig) -> _Unit:
    pitch = config.sibling_pitch
    ordered = sorted(children, key=person_sort_key)
    first_center = center - (len(ordered) - 1) * pitch / 2
    return _Unit(ordered, pitch, left=first_center - config.person_width / 2)


def position_people(
    people: Sequence[Person],
    depths: Mapping[PersonId, int],
    unions: Sequence[Marriage],
    config: LayoutConfig,
) -> Dict[PersonId, Position]:
    """Return top-left positions for ``people`` and set ``x``/``y`` on every union."""

    rows: Dict[int, _RowPlan] = {}
    for person in people:
        depth = depths.get(person.id, 0)
        rows.setdefault(depth, _RowPlan(depth)).people.append(person)

    positions: Dict[PersonId, Position] = {}
    for depth in sorted(rows):
        row = rows[depth]
        _build_row_units(row, unions, config)
        _pack_row(row, config)
        for unit in row.units:
            unit.place(positions, depth * config.grid_y)
    for union in unions:
        union.x = union_center(union, positions, config.person_width)

    anchored: Set[PersonId] = {
        p.id for row in rows.values() for unit in row.units if unit.anchored for p in unit.members
    }
    ordered_unions = sorted(unions, key=lambda u: (u.depth, union_sort_key(u, set(u.parent_ids))))

    moved = 0
    for depth in sorted(rows):
        row = rows[depth]
        groups: List[_Unit] = []
        free_ids: Set[PersonId] = set()
        for union in ordered_unions:
            free = [
                c for c in union.children if c.id not in anchored and depths.get(c.id, 0) == depth
            ]
            if not free:
                continue
            center = union_center(union, positions, config.person_width)
            groups.append(_sibling_unit(free, center, config))
            free_ids.update(c.id for c in free)
        if not groups:
            continue

        kept = [u for u in row.units if u.anchored or not any(p.id in free_ids for p in u.members)]
        blocks = sorted(kept + groups, key=lambda u: u.left)
        _resolve_overlaps(blocks, config.min_gap, config.person_width)
        for block in blocks:
            block.place(positions, depth * config.grid_y)
        row.units = blocks
        moved += len(free_ids)

    for person in people:
        if person.id not in positions:
            logger.warning("Person %r was not placed by any unit; using the default slot", person.id)
            positions[person.id] = (config.padding, depths.get(person.id, 0) * config.grid_y)

    for union in unions:
        union.x = union_center(union, positions, config.person_width)
        union.y = union.depth * config.grid_y

    logger.info(
        "Positioned %d people in %d rows; %d children centred under their unions",
        len(positions),
        len(rows),
        moved,
    )
    return positions


apply_debug_logging(globals(), logger=logger, skip={"union_sort_key", "union_center"})
