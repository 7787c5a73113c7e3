# constitution/domain/audit_diff.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

CHANGE_KINDS = ("create", "update", "delete", "reorder")

SNAPSHOT_FIELDS = (
    "title",
    "content",
    "type",
    "order",
    "parent_id",
    "article_number",
    "section_number",
    "subsection_letter",
    "amendment_number",
)

Snapshot = Dict[str, Any]


def audit_snapshot(section: Any) -> Snapshot:
    """
    Project a section onto the fields the audit log keeps.

    Absent (None) values are dropped so snapshots stay minimal.
    """
    snapshot = {}
    for field in SNAPSHOT_FIELDS:
        value = getattr(section, field, None)
        if value is not None:
            snapshot[field] = value
    return snapshot


def display_name(snapshot: Optional[Snapshot]) -> str:
    """
    Label for a section as it was at audit time.

    Only the cached numbering fields carried in the snapshot are used; the
    full hierarchy is not available once the section has moved or gone.
    """
    if not snapshot:
        return "section"

    section_type = snapshot.get("type")

    if section_type == "preamble":
        return "Preamble"
    if section_type == "article":
        number = snapshot.get("article_number")
        return f"Article {number}" if number else "Article"
    if section_type == "section":
        number = snapshot.get("section_number")
        return f"Section {number}" if number else "Section"
    if section_type == "subsection":
        letter = snapshot.get("subsection_letter")
        return f"Subsection {letter}" if letter else "Subsection"
    if section_type == "amendment":
        number = snapshot.get("amendment_number")
        return f"Amendment {number}" if number else "Amendment"

    return section_type or "section"


def format_order(value: Any) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _title_change(before: Snapshot, after: Snapshot) -> Optional[str]:
    old = before.get("title") or ""
    new = after.get("title") or ""

    if old == new:
        return None
    if not old:
        return f'added title "{new}"'
    if not new:
        return f'removed title "{old}"'
    return f'changed title from "{old}" to "{new}"'


def _content_change(before: Snapshot, after: Snapshot) -> Optional[str]:
    old = before.get("content") or ""
    new = after.get("content") or ""

    if old == new:
        return None

    old_len, new_len = len(old), len(new)
    if old_len == 0:
        return f"added content ({new_len} characters)"
    if new_len == 0:
        return f"removed all content (was {old_len} characters)"

    delta = new_len - old_len
    signed = f"+{delta}" if delta > 0 else str(delta)
    return f"modified content ({old_len} → {new_len} characters, {signed})"


def _type_change(before: Snapshot, after: Snapshot) -> Optional[str]:
    if before.get("type") == after.get("type"):
        return None
    return f'changed type from "{before.get("type") or ""}" to "{after.get("type") or ""}"'


def _order_change(before: Snapshot, after: Snapshot) -> Optional[str]:
    if before.get("order") == after.get("order"):
        return None
    return (
        f"changed position from {format_order(before.get('order'))} "
        f"to {format_order(after.get('order'))}"
    )


def update_fragments(before: Optional[Snapshot], after: Optional[Snapshot]) -> List[str]:
    before, after = before or {}, after or {}
    fragments = (
        _title_change(before, after),
        _content_change(before, after),
        _type_change(before, after),
        _order_change(before, after),
    )
    return [fragment for fragment in fragments if fragment]


def describe_change(
    change_kind: str,
    before: Optional[Snapshot] = None,
    after: Optional[Snapshot] = None,
) -> str:
    if change_kind == "create":
        name = display_name(after)
        title = (after or {}).get("title")
        return f'Created {name}: "{title}"' if title else f"Created {name}"

    if change_kind == "delete":
        name = display_name(before)
        title = (before or {}).get("title")
        return f'Deleted {name}: "{title}"' if title else f"Deleted {name}"

    if change_kind == "update":
        name = display_name(after or before)
        fragments = update_fragments(before, after)
        if fragments:
            return f"Updated {name}: {', '.join(fragments)}"
        return f"Updated {name}"

    if change_kind == "reorder":
        name = display_name(after or before)
        return (
            f"Reordered {name} from position {format_order((before or {}).get('order'))} "
            f"to {format_order((after or {}).get('order'))}"
        )

    raise ValueError(f"Unknown change kind: {change_kind}")
