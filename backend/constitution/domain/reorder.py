# constitution/domain/reorder.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from .hierarchy import TOP_LEVEL_TYPES, children_of
from .invariants.exceptions import MoveRejected
from .layout import flatten_hierarchy

DIRECTIONS = {"up": -1, "down": 1}


@dataclass(frozen=True)
class MoveValidation:
    is_valid: bool
    new_parent_id: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class SwapPlan:
    section: Any
    neighbour: Optional[Any]
    reason: Optional[str] = None

    @property
    def is_noop(self) -> bool:
        return self.neighbour is None


def _nearest_before(hierarchy: Sequence[Any], destination_index: int, types: set) -> Optional[Any]:
    start = min(destination_index, len(hierarchy)) - 1
    for i in range(start, -1, -1):
        if hierarchy[i].type in types:
            return hierarchy[i]
    return None


def validate_move(section: Any, destination_index: int, hierarchy: Sequence[Any]) -> MoveValidation:
    """
    Check whether `section` may be dropped at `destination_index` of the
    flattened display order.

    Top-level types go anywhere. A section needs an article somewhere before
    the destination, a subsection needs a section or subsection; the nearest
    one becomes the proposed parent.
    """
    if section.type in TOP_LEVEL_TYPES:
        return MoveValidation(is_valid=True)

    if section.type == "section":
        parent = _nearest_before(hierarchy, destination_index, {"article"})
        if parent is None:
            return MoveValidation(is_valid=False, message="Sections must be placed under an article")
        return MoveValidation(is_valid=True, new_parent_id=parent.id)

    if section.type == "subsection":
        parent = _nearest_before(hierarchy, destination_index, {"section", "subsection"})
        if parent is None:
            return MoveValidation(
                is_valid=False,
                message="Subsections must be placed under a section or another subsection",
            )
        return MoveValidation(is_valid=True, new_parent_id=parent.id)

    return MoveValidation(is_valid=False, message="Invalid section type")


def plan_swap(section: Any, all_sections: Sequence[Any], direction: str) -> SwapPlan:
    """Find the sibling whose `order` should be swapped with `section`'s."""
    if direction not in DIRECTIONS:
        raise MoveRejected(f"Invalid direction: {direction}")

    siblings = children_of(section.parent_id, all_sections)
    index = next(i for i, s in enumerate(siblings) if s.id == section.id)
    target = index + DIRECTIONS[direction]

    if target < 0:
        return SwapPlan(section, None, reason="Section is already first among its siblings")
    if target >= len(siblings):
        return SwapPlan(section, None, reason="Section is already last among its siblings")

    return SwapPlan(section, siblings[target])


def plan_relocation(
    section: Any,
    destination_index: int,
    all_sections: Sequence[Any],
) -> Tuple[Optional[str], float]:
    """
    Resolve a drag-move into (new_parent_id, new_order).

    `destination_index` addresses the display order with the moved section
    and its subtree taken out. Raises MoveRejected if the drop is illegal.
    """
    others = [s for s in all_sections if s.id != section.id]
    hierarchy = flatten_hierarchy(others)

    validation = validate_move(section, destination_index, hierarchy)
    if not validation.is_valid:
        raise MoveRejected(validation.message)

    parent_id = validation.new_parent_id
    group = children_of(parent_id, others)
    group_ids = {s.id for s in group}

    preceding: List[Any] = [
        s for s in hierarchy[:max(destination_index, 0)] if s.id in group_ids
    ]

    if not preceding:
        return parent_id, (group[0].order - 1) if group else 1.0

    anchor = preceding[-1]
    position = next(i for i, s in enumerate(group) if s.id == anchor.id)
    if position + 1 < len(group):
        following = group[position + 1]
        return parent_id, (anchor.order + following.order) / 2
    return parent_id, anchor.order + 1
