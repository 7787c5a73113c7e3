# constitution/domain/numbering.py
"""
Display numbering for constitution sections.

Numbers are derived purely from position in the hierarchy: nothing here reads
the cached `article_number` / `section_number` / ... columns. Those columns are
written from `numbering_cache()` and exist only so audit snapshots can carry a
label.
"""
from __future__ import annotations

from string import ascii_uppercase
from typing import Any, Dict, List, Optional, Sequence

from .hierarchy import children_of, index_by_id, iter_ancestors, of_type

ROMAN_NUMERALS = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)


def to_roman_numeral(num: int) -> str:
    if not isinstance(num, int) or num < 1:
        raise ValueError(f"Roman numerals are defined for positive integers only, got {num!r}")

    result = []
    for value, symbol in ROMAN_NUMERALS:
        while num >= value:
            result.append(symbol)
            num -= value
    return "".join(result)


def _with_title(label: str, title: Optional[str]) -> str:
    return f"{label} - {title}" if title else label


def _including(section: Any, all_sections: Sequence[Any]) -> List[Any]:
    if any(s.id == section.id for s in all_sections):
        return list(all_sections)
    return [*all_sections, section]


def rank_in_group(section: Any, group: Sequence[Any]) -> int:
    """1-based position of `section` within an already ordered group."""
    for index, member in enumerate(group, start=1):
        if member.id == section.id:
            return index
    raise ValueError(f"Section {section.id} is not part of the given group")


def _subsection_letter(rank: int) -> str:
    # Past Z the plain rank is used
    if 1 <= rank <= len(ascii_uppercase):
        return ascii_uppercase[rank - 1]
    return str(rank)


def subsection_number(section: Any, all_sections: Sequence[Any]) -> Optional[str]:
    """
    Compute the nested number of a subsection, e.g. "1.1" or "2.3B".

    Returns None when no `section` ancestor can be resolved, or when the chain
    between the subsection and that ancestor contains other types.
    """
    sections = _including(section, all_sections)
    by_id = index_by_id(sections)

    chain = [section]
    root = None
    for ancestor in iter_ancestors(section, by_id):
        if ancestor.type == "section":
            root = ancestor
            break
        chain.append(ancestor)

    if root is None or any(node.type != "subsection" for node in chain):
        return None

    section_no = rank_in_group(root, children_of(root.parent_id, sections, "section"))
    number = str(section_no)

    for depth, node in enumerate(reversed(chain)):
        rank = rank_in_group(node, children_of(node.parent_id, sections, "subsection"))
        number += f".{rank}" if depth == 0 else _subsection_letter(rank)

    return number


def display_title(section: Any, all_sections: Sequence[Any]) -> str:
    sections = _including(section, all_sections)
    title = section.title

    if section.type == "preamble":
        return "Preamble"

    if section.type == "article":
        rank = rank_in_group(section, of_type(sections, "article"))
        return _with_title(f"Article {to_roman_numeral(rank)}", title)

    if section.type == "section":
        rank = rank_in_group(section, children_of(section.parent_id, sections, "section"))
        return _with_title(f"Section {rank}", title)

    if section.type == "amendment":
        rank = rank_in_group(section, of_type(sections, "amendment"))
        return _with_title(f"Amendment {rank}", title)

    if section.type == "subsection":
        number = subsection_number(section, sections)
        if number is None:
            return _with_title("Subsection", title)
        return _with_title(f"Subsection {number}", title)

    return title or "Untitled Section"


def indent_level(section: Any, all_sections: Sequence[Any]) -> int:
    if section.type == "section":
        return 1
    if section.type != "subsection":
        return 0

    depth = 2
    for ancestor in iter_ancestors(section, index_by_id(_including(section, all_sections))):
        if ancestor.type != "subsection":
            break
        depth += 1
    return depth


def numbering_cache(all_sections: Sequence[Any]) -> Dict[str, Dict[str, Any]]:
    """Values for the cached numbering columns, keyed by section id."""
    cache: Dict[str, Dict[str, Any]] = {}

    for rank, article in enumerate(of_type(all_sections, "article"), start=1):
        cache[article.id] = {"article_number": rank}

    for rank, amendment in enumerate(of_type(all_sections, "amendment"), start=1):
        cache[amendment.id] = {"amendment_number": rank}

    for section in all_sections:
        if section.type == "section":
            group = children_of(section.parent_id, all_sections, "section")
            cache[section.id] = {"section_number": rank_in_group(section, group)}
        elif section.type == "subsection":
            cache[section.id] = {"subsection_letter": subsection_number(section, all_sections)}

    return cache
