# constitution/domain/hierarchy.py
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence

from .invariants.exceptions import StructuralIntegrityError

SECTION_TYPES = ("preamble", "article", "section", "subsection", "amendment")
TOP_LEVEL_TYPES = {"preamble", "article", "amendment"}

# type -> parent types it may hang under (empty = top level only)
ALLOWED_PARENT_TYPES: Dict[str, set] = {
    "preamble": set(),
    "article": set(),
    "amendment": set(),
    "section": {"article"},
    "subsection": {"section", "subsection"},
}


def _order_key(section: Any) -> float:
    return section.order or 0


def sort_by_order(sections: Sequence[Any]) -> List[Any]:
    """Sort by `order`; ties keep their input order."""
    return sorted(sections, key=_order_key)


def index_by_id(sections: Sequence[Any]) -> Dict[str, Any]:
    return {s.id: s for s in sections}


def of_type(sections: Sequence[Any], section_type: str) -> List[Any]:
    return sort_by_order([s for s in sections if s.type == section_type])


def children_of(
    parent_id: Optional[str],
    sections: Sequence[Any],
    section_type: Optional[str] = None,
) -> List[Any]:
    """Ordered direct children of `parent_id`, optionally narrowed to one type."""
    return sort_by_order([
        s for s in sections
        if s.parent_id == parent_id
        and (section_type is None or s.type == section_type)
    ])


def iter_ancestors(section: Any, by_id: Dict[str, Any]) -> Iterator[Any]:
    """
    Yield the resolved ancestors of `section`, nearest first.

    Stops silently at an unresolved `parent_id` (dangling reference).
    Raises StructuralIntegrityError if the parent chain loops.
    """
    visited = {section.id}
    parent_id = section.parent_id

    while parent_id:
        if parent_id in visited:
            raise StructuralIntegrityError(
                f"Parent cycle detected at section {parent_id}",
                section_ids=visited,
            )
        parent = by_id.get(parent_id)
        if parent is None:
            return
        visited.add(parent_id)
        yield parent
        parent_id = parent.parent_id


def descendants_of(section_id: str, sections: Sequence[Any]) -> List[Any]:
    """All descendants of any type, depth-first, each child group in order."""
    result: List[Any] = []
    visited = {section_id}

    def walk(parent_id: str) -> None:
        for child in children_of(parent_id, sections):
            if child.id in visited:
                raise StructuralIntegrityError(
                    f"Parent cycle detected at section {child.id}",
                    section_ids=visited,
                )
            visited.add(child.id)
            result.append(child)
            walk(child.id)

    walk(section_id)
    return result


def find_orphans(sections: Sequence[Any]) -> List[Any]:
    """Sections whose `parent_id` does not resolve within `sections`."""
    by_id = index_by_id(sections)
    return sort_by_order([
        s for s in sections
        if s.parent_id and s.parent_id not in by_id
    ])
