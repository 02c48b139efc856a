"""Pipeline orchestration: indexer, depths, widths, colours, positions, dimensions."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..config import LayoutConfig, get_layout_config
from ..model import (
    LayoutNode,
    LayoutResult,
    Marriage,
    Person,
    PersonId,
    Relationship,
)
from .colors import assign_branch_colors, marriage_color
from .depths import assign_depths, assign_marriage_depths
from .dimensions import calculate_dimensions
from .indexer import RelationshipIndex, build_index
from .positioner import Position, position_people
from .widths import calculate_subtree_widths

logger = logging.getLogger(__name__)

PersonLike = Union[Person, Mapping[str, Any]]
RelationshipLike = Union[Relationship, Mapping[str, Any]]


def coerce_people(people: Iterable[PersonLike]) -> List[Person]:
    return [p if isinstance(p, Person) else Person.from_record(p) for p in people]


def coerce_relationships(relationships: Iterable[RelationshipLike]) -> List[Relationship]:
    """Load relationship records, skipping those without both ends and a type."""

    coerced: List[Relationship] = []
    skipped = 0
    for record in relationships:
        if isinstance(record, Relationship):
            coerced.append(record)
            continue
        try:
            coerced.append(Relationship.from_record(record))
        except ValueError as exc:
            logger.debug("Skipping %s", exc)
            skipped += 1
    if skipped:
        logger.warning("Skipped %d incomplete relationship record(s)", skipped)
    return coerced


@dataclass
class _LayoutContext:
    """Scratch state for one ``generate_layout`` call."""

    config: LayoutConfig
    people: List[Person]
    index: RelationshipIndex
    depths: Dict[PersonId, int] = field(default_factory=dict)
    colors: Dict[PersonId, str] = field(default_factory=dict)
    positions: Dict[PersonId, Position] = field(default_factory=dict)

    @property
    def unions(self) -> List[Marriage]:
        return list(self.index.unions.values())

    def run(self) -> LayoutResult:
        config = self.config
        self.depths = assign_depths(self.people, self.index, config.max_repair_passes)
        assign_marriage_depths(self.unions, self.depths)
        calculate_subtree_widths(self.unions, config)
        self.colors = assign_branch_colors(self.people, self.depths, self.index, config.palette)
        self.positions = position_people(self.people, self.depths, self.unions, config)

        nodes = [self._node(person) for person in self.people]
        marriages = self.unions
        for union in marriages:
            union.branch_color = marriage_color(union, self.colors, config.palette)
        dimensions = calculate_dimensions(nodes, marriages, config)
        return LayoutResult(nodes=nodes, marriages=marriages, dimensions=dimensions)

    def _node(self, person: Person) -> LayoutNode:
        x, y = self.positions[person.id]
        return LayoutNode(
            person=person,
            x=x,
            y=y,
            depth=self.depths[person.id],
            branch_color=self.colors.get(person.id, self.config.palette[0]),
            spouses=self.index.resolve(self.index.spouses(person.id)),
            children=self.index.resolve(self.index.children(person.id)),
            parents=self.index.resolve(self.index.parents(person.id)),
        )


class FamilyTreeLayoutEngine:
    """Stateless layout engine; holds only its configuration."""

    def __init__(self, config: Optional[LayoutConfig] = None, **overrides: Any) -> None:
        base = copy.deepcopy(config) if config is not None else get_layout_config()
        self.config = base.replace(**overrides) if overrides else base

    def generate_layout(
        self,
        people: Sequence[PersonLike],
        relationships: Sequence[RelationshipLike],
    ) -> LayoutResult:
        people_list = coerce_people(people)
        relationship_list = coerce_relationships(relationships)
        logger.info(
            "Generating layout for %d people and %d relationships",
            len(people_list),
            len(relationship_list),
        )
        index = build_index(people_list, relationship_list)
        context = _LayoutContext(
            config=self.config,
            people=list(index.people_by_id.values()),
            index=index,
        )
        result = context.run()
        logger.info(
            "Layout finished: %d nodes, %d unions, %gx%g canvas",
            len(result.nodes),
            len(result.marriages),
            result.dimensions.width,
            result.dimensions.height,
        )
        return result


def generate_layout(
    people: Sequence[PersonLike],
    relationships: Sequence[RelationshipLike],
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    return FamilyTreeLayoutEngine(config).generate_layout(people, relationships)
