"""Adjacency maps and union identities built from raw relationship edges."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from ..logging_utils import apply_debug_logging
from ..model import Marriage, Person, PersonId, Relationship, UnionKey, union_key

logger = logging.getLogger(__name__)


@dataclass
class RelationshipIndex:
    people_by_id: Dict[PersonId, Person] = field(default_factory=dict)
    children_of: Dict[PersonId, List[PersonId]] = field(default_factory=dict)
    parents_of: Dict[PersonId, List[PersonId]] = field(default_factory=dict)
    spouses_of: Dict[PersonId, List[PersonId]] = field(default_factory=dict)
    # dict used as an insertion-ordered set
    explicit_pairs: Dict[UnionKey, None] = field(default_factory=dict)
    unions: Dict[UnionKey, Marriage] = field(default_factory=dict)

    def children(self, person_id: PersonId) -> List[PersonId]:
        return self.children_of.get(person_id, [])

    def parents(self, person_id: PersonId) -> List[PersonId]:
        return self.parents_of.get(person_id, [])

    def spouses(self, person_id: PersonId) -> List[PersonId]:
        return self.spouses_of.get(person_id, [])

    def resolve(self, ids: Iterable[PersonId]) -> List[Person]:
        return [self.people_by_id[pid] for pid in ids if pid in self.people_by_id]


def _append_unique(mapping: Dict[PersonId, List[PersonId]], key: PersonId, value: PersonId) -> None:
    values = mapping.setdefault(key, [])
    if value not in values:
        values.append(value)


def index_people(people: Sequence[Person]) -> Dict[PersonId, Person]:
    people_by_id: Dict[PersonId, Person] = {}
    for person in people:
        if person.id in people_by_id:
            logger.warning("Duplicate person id %r; keeping the first record", person.id)
            continue
        people_by_id[person.id] = person
    return people_by_id


def _new_union(index: RelationshipIndex, key: UnionKey, *, explicit: bool) -> Marriage:
    parent_a = index.people_by_id.get(key[0])
    parent_b = index.people_by_id.get(key[1]) if len(key) > 1 else None
    return Marriage(key=key, parent_a=parent_a, parent_b=parent_b, explicit=explicit)


def build_index(people: Sequence[Person], relationships: Iterable[Relationship]) -> RelationshipIndex:
    """Index ``relationships`` over ``people`` and derive the union table."""

    index = RelationshipIndex(people_by_id=index_people(people))
    known = index.people_by_id

    skipped = 0
    for rel in relationships:
        a, b = rel.from_person_id, rel.to_person_id
        if a not in known or b not in known:
            logger.debug("Skipping %s edge %r -> %r with unknown person", rel.relationship_type, a, b)
            skipped += 1
            continue
        if a == b:
            logger.debug("Skipping self-referencing %s edge on %r", rel.relationship_type, a)
            skipped += 1
            continue
        if rel.is_spouse:
            index.explicit_pairs.setdefault(union_key(a, b), None)
            _append_unique(index.spouses_of, a, b)
            _append_unique(index.spouses_of, b, a)
        elif rel.is_parent:
            _append_unique(index.children_of, a, b)
            _append_unique(index.parents_of, b, a)
        else:
            logger.debug("Skipping edge with unknown relationship type %r", rel.relationship_type)
            skipped += 1

    for key in index.explicit_pairs:
        index.unions[key] = _new_union(index, key, explicit=True)

    for person in known.values():
        parents = index.parents(person.id)
        if not parents:
            continue
        key = union_key(*parents)
        if len(key) > 2:
            logger.warning(
                "Person %r has %d recorded parents; grouping them in one union", person.id, len(key)
            )
        union = index.unions.get(key)
        if union is None:
            union = _new_union(index, key, explicit=False)
            index.unions[key] = union
        union.children.append(person)

    logger.info(
        "Indexed %d people: %d unions (%d explicit), %d edges skipped",
        len(known),
        len(index.unions),
        len(index.explicit_pairs),
        skipped,
    )
    return index


apply_debug_logging(globals(), logger=logger)
