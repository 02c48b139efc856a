"""Invariant checks over a finished layout."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

import numpy as np

from ..config import LayoutConfig, get_layout_config
from ..model import LayoutNode, LayoutResult, PersonId, union_key
from .engine import RelationshipLike, coerce_relationships

logger = logging.getLogger(__name__)

_TOLERANCE = 1e-6


@dataclass
class LayoutViolation:
    kind: str
    message: str
    person_ids: List[PersonId] = field(default_factory=list)

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return self.message


def _row_violations(
    nodes: Sequence[LayoutNode], spouse_pairs: Set[tuple], config: LayoutConfig
) -> List[LayoutViolation]:
    rows: Dict[int, List[LayoutNode]] = defaultdict(list)
    for node in nodes:
        rows[node.depth].append(node)

    violations: List[LayoutViolation] = []
    spouse_gap = min(config.spouse_gap, config.min_gap)
    for depth in sorted(rows):
        row = sorted(rows[depth], key=lambda n: n.x)
        if len(row) < 2:
            continue
        lefts = np.array([n.x for n in row], dtype=float)
        gaps = np.diff(lefts) - config.person_width
        for idx in np.flatnonzero(gaps < config.min_gap - _TOLERANCE):
            a, b = row[idx], row[idx + 1]
            allowed = spouse_gap if union_key(a.person.id, b.person.id) in spouse_pairs else config.min_gap
            if gaps[idx] >= allowed - _TOLERANCE:
                continue
            violations.append(
                LayoutViolation(
                    "row_overlap",
                    f"{a.person.id} and {b.person.id} in row {depth} are {gaps[idx]:g} apart "
                    f"(minimum {allowed:g})",
                    [a.person.id, b.person.id],
                )
            )
    return violations


def check_layout(
    result: LayoutResult,
    relationships: Sequence[RelationshipLike],
    config: Optional[LayoutConfig] = None,
) -> List[LayoutViolation]:
    """Return every broken layout invariant; an empty list means the layout is sound."""

    config = config or get_layout_config()
    violations: List[LayoutViolation] = []

    counts = Counter(node.person.id for node in result.nodes)
    for pid, count in counts.items():
        if count > 1:
            violations.append(LayoutViolation("duplicate_node", f"{pid} has {count} layout nodes", [pid]))

    depth = {node.person.id: node.depth for node in result.nodes}
    if depth and min(depth.values()) != 0:
        violations.append(
            LayoutViolation("not_normalized", f"shallowest generation is {min(depth.values())}, not 0")
        )

    spouse_pairs: Set[tuple] = set()
    for rel in coerce_relationships(relationships):
        a, b = rel.from_person_id, rel.to_person_id
        if a not in depth or b not in depth or a == b:
            continue
        if rel.is_parent and depth[b] <= depth[a]:
            violations.append(
                LayoutViolation(
                    "depth_order",
                    f"child {b} (depth {depth[b]}) is not below parent {a} (depth {depth[a]})",
                    [a, b],
                )
            )
        elif rel.is_spouse:
            spouse_pairs.add(union_key(a, b))
            if depth[a] != depth[b]:
                violations.append(
                    LayoutViolation(
                        "spouse_depth",
                        f"spouses {a} and {b} are on rows {depth[a]} and {depth[b]}",
                        [a, b],
                    )
                )

    for marriage in result.marriages:
        parent_depths = [depth[pid] for pid in marriage.parent_ids if pid in depth]
        if parent_depths and marriage.depth != min(parent_depths):
            violations.append(
                LayoutViolation(
                    "marriage_depth",
                    f"union {marriage.id} sits on row {marriage.depth}, expected {min(parent_depths)}",
                    list(marriage.parent_ids),
                )
            )

    violations.extend(_row_violations(result.nodes, spouse_pairs, config))
    if violations:
        logger.info("Layout check found %d violation(s)", len(violations))
    return violations
