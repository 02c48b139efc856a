"""Advisory data-quality checks for family records.

Nothing here blocks layout: the engine copes with every condition reported
below. The warnings are meant for the person curating the tree.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from .layout.engine import PersonLike, RelationshipLike, coerce_people
from .model import RELATIONSHIP_TYPES, Person, PersonId, Relationship, union_key

logger = logging.getLogger(__name__)


@dataclass
class FamilyWarning:
    kind: str
    message: str
    person_ids: List[PersonId] = field(default_factory=list)

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return self.message


def _name(people: Mapping[PersonId, Person], pid: PersonId) -> str:
    person = people.get(pid)
    if person is None or not person.full_name:
        return pid
    return person.full_name


def _load_relationships(
    relationships: Sequence[RelationshipLike],
) -> Tuple[List[Relationship], List[FamilyWarning]]:
    loaded: List[Relationship] = []
    warnings: List[FamilyWarning] = []
    for record in relationships:
        if isinstance(record, Relationship):
            loaded.append(record)
            continue
        try:
            loaded.append(Relationship.from_record(record))
        except ValueError:
            ends = [
                str(record[key])
                for key in ("from_person_id", "to_person_id")
                if record.get(key) is not None
            ]
            warnings.append(
                FamilyWarning(
                    "incomplete_relationship",
                    "Relationship record is missing a person or type: "
                    + (", ".join(ends) if ends else "no person ids"),
                    ends,
                )
            )
    return loaded, warnings


def _edge_warnings(
    relationships: Sequence[Relationship], people: Mapping[PersonId, Person]
) -> List[FamilyWarning]:
    warnings: List[FamilyWarning] = []
    seen = Counter(
        (r.relationship_type, r.from_person_id, r.to_person_id)
        if r.is_parent
        else (r.relationship_type,) + union_key(r.from_person_id, r.to_person_id)
        for r in relationships
    )
    for edge, count in seen.items():
        if count > 1:
            warnings.append(
                FamilyWarning(
                    "duplicate_relationship",
                    f"{edge[0].capitalize()} link between {_name(people, edge[1])} and "
                    f"{_name(people, edge[-1])} is recorded {count} times",
                    list(edge[1:]),
                )
            )

    for rel in relationships:
        a, b = rel.from_person_id, rel.to_person_id
        if rel.relationship_type not in RELATIONSHIP_TYPES:
            warnings.append(
                FamilyWarning(
                    "unknown_relationship_type",
                    f"Unknown relationship type '{rel.relationship_type}' between {a} and {b}",
                    [a, b],
                )
            )
        unknown = [pid for pid in (a, b) if pid not in people]
        if unknown:
            warnings.append(
                FamilyWarning(
                    "dangling_reference",
                    f"{rel.relationship_type.capitalize()} link refers to unknown person "
                    f"{', '.join(unknown)}",
                    unknown,
                )
            )
        elif a == b:
            warnings.append(
                FamilyWarning(
                    "self_reference",
                    f"{_name(people, a)} is linked to themselves as {rel.relationship_type}",
                    [a],
                )
            )
    return warnings


def _find_cycle_members(children_of: Mapping[PersonId, Iterable[PersonId]]) -> List[PersonId]:
    """People that are their own ancestor, found with an iterative three-colour DFS."""

    WHITE, GREY, BLACK = 0, 1, 2
    state: Dict[PersonId, int] = {}
    on_cycle: List[PersonId] = []
    for start in children_of:
        if state.get(start, WHITE) != WHITE:
            continue
        stack: List[Tuple[PersonId, Iterable[PersonId]]] = [(start, iter(children_of.get(start, ())))]
        path: List[PersonId] = [start]
        state[start] = GREY
        while stack:
            node, children = stack[-1]
            advanced = False
            for child in children:
                colour = state.get(child, WHITE)
                if colour == GREY:
                    for pid in path[path.index(child):]:
                        if pid not in on_cycle:
                            on_cycle.append(pid)
                elif colour == WHITE:
                    state[child] = GREY
                    path.append(child)
                    stack.append((child, iter(children_of.get(child, ()))))
                    advanced = True
                    break
            if not advanced:
                state[node] = BLACK
                path.pop()
                stack.pop()
    return on_cycle


def validate_family(
    people: Sequence[PersonLike], relationships: Sequence[RelationshipLike]
) -> List[FamilyWarning]:
    """Return human-readable warnings about suspicious family data."""

    people_list = coerce_people(people)
    rels, warnings = _load_relationships(relationships)
    by_id: Dict[PersonId, Person] = {}
    for person in people_list:
        by_id.setdefault(person.id, person)

    warnings.extend(_edge_warnings(rels, by_id))

    parents_of: Dict[PersonId, List[PersonId]] = {}
    children_of: Dict[PersonId, List[PersonId]] = {}
    claimed_parents: Set[PersonId] = set()
    spouse_pairs: Dict[Tuple[PersonId, ...], None] = {}
    linked: Set[PersonId] = set()
    for rel in rels:
        a, b = rel.from_person_id, rel.to_person_id
        linked.update((a, b))
        if a == b:
            continue
        if rel.is_parent:
            claimed_parents.add(b)
            if a in by_id and b in by_id:
                parents_of.setdefault(b, [])
                if a not in parents_of[b]:
                    parents_of[b].append(a)
                children_of.setdefault(a, []).append(b)
        elif rel.is_spouse and a in by_id and b in by_id:
            spouse_pairs.setdefault(union_key(a, b), None)

    for person in by_id.values():
        pid = person.id
        parents = parents_of.get(pid, [])
        if pid in claimed_parents and not parents:
            warnings.append(
                FamilyWarning(
                    "missing_parents",
                    f"Child has no parents: every parent recorded for {_name(by_id, pid)} is unknown",
                    [pid],
                )
            )
        if len(parents) > 2:
            warnings.append(
                FamilyWarning(
                    "too_many_parents",
                    f"Child has >2 parents: {_name(by_id, pid)} has {len(parents)} recorded parents",
                    [pid] + parents,
                )
            )
        for parent_id in parents:
            parent = by_id[parent_id]
            if (
                parent.birth_year is not None
                and person.birth_year is not None
                and parent.birth_year >= person.birth_year
            ):
                warnings.append(
                    FamilyWarning(
                        "parent_younger",
                        f"Parent younger than child: {_name(by_id, parent_id)} ({parent.birth_year}) "
                        f"is recorded as parent of {_name(by_id, pid)} ({person.birth_year})",
                        [parent_id, pid],
                    )
                )
        if pid not in linked:
            warnings.append(
                FamilyWarning("isolated_person", f"{_name(by_id, pid)} has no relationships", [pid])
            )

    for a, b in spouse_pairs:
        shared = set(parents_of.get(a, [])) & set(parents_of.get(b, []))
        if shared:
            warnings.append(
                FamilyWarning(
                    "sibling_spouses",
                    f"Suspicious spouse link between siblings {_name(by_id, a)} and {_name(by_id, b)}",
                    [a, b],
                )
            )

    cycle = _find_cycle_members(children_of)
    if cycle:
        warnings.append(
            FamilyWarning(
                "ancestry_cycle",
                "Ancestry loop: " + ", ".join(_name(by_id, pid) for pid in cycle)
                + " are recorded as their own ancestors",
                cycle,
            )
        )

    for warning in warnings:
        logger.debug("Family warning [%s]: %s", warning.kind, warning.message)
    return warnings


class FamilyValidator:
    """Object form of :func:`validate_family` for callers that inject collaborators."""

    def validate(
        self, people: Sequence[PersonLike], relationships: Sequence[RelationshipLike]
    ) -> List[FamilyWarning]:
        return validate_family(people, relationships)
