"""Core data structures shared by the layout pipeline."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

PersonId = str
UnionKey = Tuple[PersonId, ...]

RELATIONSHIP_TYPES: Tuple[str, ...] = ("parent", "spouse")

_PERSON_FIELDS = {"id", "full_name", "birth_year"}
_RELATIONSHIP_FIELDS = ("from_person_id", "to_person_id", "relationship_type")


def union_key(*person_ids: PersonId) -> UnionKey:
    """Return the canonical key for a union of ``person_ids``."""

    return tuple(sorted(set(person_ids)))


def _coerce_year(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return int(value) if float(value).is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class Person:
    id: PersonId
    full_name: str
    birth_year: Optional[int] = None
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Person":
        """Build a person from a loader record, keeping unknown keys in ``extra``."""

        if record.get("id") is None:
            raise ValueError(f"person record without an id: {record!r}")
        extra = {key: value for key, value in record.items() if key not in _PERSON_FIELDS}
        return cls(
            id=str(record["id"]),
            full_name=str(record.get("full_name") or ""),
            birth_year=_coerce_year(record.get("birth_year")),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(id=self.id, full_name=self.full_name, birth_year=self.birth_year)
        return data


@dataclass(frozen=True)
class Relationship:
    from_person_id: PersonId
    to_person_id: PersonId
    relationship_type: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Relationship":
        missing = [key for key in _RELATIONSHIP_FIELDS if record.get(key) is None]
        if missing:
            raise ValueError(f"relationship record missing {', '.join(missing)}: {record!r}")
        return cls(
            from_person_id=str(record["from_person_id"]),
            to_person_id=str(record["to_person_id"]),
            relationship_type=str(record["relationship_type"]),
        )

    @property
    def is_parent(self) -> bool:
        return self.relationship_type == "parent"

    @property
    def is_spouse(self) -> bool:
        return self.relationship_type == "spouse"


def person_sort_key(person: Person) -> Tuple[bool, int, str, str]:
    """Total order used wherever people are laid out: oldest first, unknown years last."""

    year = person.birth_year
    return (year is None, year if year is not None else 0, person.full_name, person.id)


@dataclass
class Marriage:
    """A derived union of one or two parents and their shared children."""

    key: UnionKey
    parent_a: Optional[Person] = None
    parent_b: Optional[Person] = None
    children: List[Person] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    depth: int = 0
    branch_color: str = ""
    explicit: bool = False
    subtree_width: float = 0.0

    @property
    def id(self) -> str:
        return "-".join(self.key)

    @property
    def parent_ids(self) -> UnionKey:
        return self.key

    @property
    def parents(self) -> List[Person]:
        return [p for p in (self.parent_a, self.parent_b) if p is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "parentA": self.parent_a.id if self.parent_a else None,
            "parentB": self.parent_b.id if self.parent_b else None,
            "children": [child.id for child in self.children],
            "x": self.x,
            "y": self.y,
            "depth": self.depth,
            "branchColor": self.branch_color,
            "explicit": self.explicit,
        }


@dataclass
class LayoutNode:
    """A positioned person. ``x``/``y`` are the top-left corner of the person box."""

    person: Person
    x: float
    y: float
    depth: int
    branch_color: str
    spouses: List[Person] = field(default_factory=list)
    children: List[Person] = field(default_factory=list)
    parents: List[Person] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "person": self.person.to_dict(),
            "x": self.x,
            "y": self.y,
            "depth": self.depth,
            "branchColor": self.branch_color,
            "spouses": [p.id for p in self.spouses],
            "children": [p.id for p in self.children],
            "parents": [p.id for p in self.parents],
        }


@dataclass
class Dimensions:
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "minX": self.min_x,
            "maxX": self.max_x,
            "minY": self.min_y,
            "maxY": self.max_y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class LayoutResult:
    nodes: List[LayoutNode]
    marriages: List[Marriage]
    dimensions: Dimensions

    def node(self, person_id: PersonId) -> LayoutNode:
        for node in self.nodes:
            if node.person.id == person_id:
                return node
        raise KeyError(f"Unknown person '{person_id}' in layout")

    def marriage(self, *parent_ids: PersonId) -> Marriage:
        key = union_key(*parent_ids)
        for marriage in self.marriages:
            if marriage.key == key:
                return marriage
        raise KeyError(f"No union for parents {key!r} in layout")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "marriages": [marriage.to_dict() for marriage in self.marriages],
            "dimensions": self.dimensions.to_dict(),
        }


__all__ = [
    "PersonId",
    "UnionKey",
    "RELATIONSHIP_TYPES",
    "union_key",
    "Person",
    "Relationship",
    "person_sort_key",
    "Marriage",
    "LayoutNode",
    "Dimensions",
    "LayoutResult",
]
