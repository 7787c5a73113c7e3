# constitution/application/constitution/update_section.py
from typing import Any, Dict
from flask import current_app
from constitution.models.section import ConstitutionSection
from constitution.domain.audit_diff import audit_snapshot
from constitution.domain.invariants.exceptions import InvariantViolation
from constitution.domain.invariants.section import (
    assert_children_compatible,
    assert_section,
    assert_section_type,
)
from constitution.utils.audit import record_audit_entry
from constitution.utils.numbering_cache import refresh_numbering_cache
from constitution.utils.transaction import transactional
from .queries import get_section_or_404, load_sections


ALLOWED_UPDATE_FIELDS = ("title", "content", "type", "order", "parent_id")


def _validate_payload(data: Dict[str, Any]) -> None:
    if "type" in data:
        assert_section_type(data["type"])

    if "order" in data:
        order = data["order"]
        if isinstance(order, bool) or not isinstance(order, (int, float)):
            raise InvariantViolation("order must be a number")

    if "content" in data and not isinstance(data["content"], str):
        raise InvariantViolation("content must be a string")

    if "title" in data and data["title"] is not None and not isinstance(data["title"], str):
        raise InvariantViolation("title must be a string")


def update_section(
    *,
    constitution_id: str,
    section_id: str,
    actor_id: str,
    actor_name: str,
    data: Dict[str, Any],
) -> ConstitutionSection:
    """
    Apply a partial update to a section.

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    - Hierarchy invariants revalidated when type or parent change
    """
    _validate_payload(data)

    section = get_section_or_404(constitution_id, section_id)
    sections = load_sections(constitution_id)

    before = audit_snapshot(section)
    changed_fields: list[str] = []

    with transactional():
        for field in ALLOWED_UPDATE_FIELDS:
            if field in data and getattr(section, field) != data[field]:
                setattr(section, field, data[field])
                changed_fields.append(field)

        if not changed_fields:
            # Explicitly fail instead of silently succeeding
            raise InvariantViolation("No valid fields provided for update")

        if "parent_id" in changed_fields and not section.parent_id:
            section.parent_id = None

        if {"type", "parent_id"} & set(changed_fields):
            assert_section(section, sections)
            assert_children_compatible(section, sections)

        section.last_modified_by = actor_id

        refresh_numbering_cache(sections)

    current_app.logger.info(
        "Updated section %s (%s)", section.id, ", ".join(changed_fields)
    )

    record_audit_entry(
        constitution_id=constitution_id,
        change_kind="update",
        section_id=section.id,
        actor_id=actor_id,
        actor_name=actor_name,
        before=before,
        after=audit_snapshot(section),
    )

    return section
