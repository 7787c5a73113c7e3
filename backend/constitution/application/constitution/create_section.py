# constitution/application/constitution/create_section.py
from typing import Optional
from flask import current_app
from constitution.extensions import db
from constitution.models.section import ConstitutionSection
from constitution.domain.audit_diff import audit_snapshot
from constitution.domain.hierarchy import of_type, children_of
from constitution.domain.invariants.section import assert_section, assert_section_type
from constitution.utils.audit import record_audit_entry
from constitution.utils.numbering_cache import refresh_numbering_cache
from constitution.utils.order import next_sibling_order
from constitution.utils.transaction import transactional
from .queries import load_sections


def default_title(section_type: str, parent_id: Optional[str], sections) -> str:
    if section_type == "preamble":
        return "Preamble"
    if section_type == "article":
        return "General Provisions"
    if section_type == "section" and parent_id:
        return "Name of Student Organization"
    if section_type == "amendment":
        return f"Amendment {len(of_type(sections, 'amendment')) + 1}"
    return ""


def create_section(
    *,
    constitution_id: str,
    section_type: str,
    actor_id: str,
    actor_name: str,
    parent_id: Optional[str] = None,
) -> ConstitutionSection:
    """
    Create a section at the end of its sibling group.

    Responsibilities:
    - Hierarchy invariants (type, parent, single preamble)
    - order = max(sibling orders) + 1
    - Default title and numbering cache
    - Audit logging (best-effort, after commit)
    """
    assert_section_type(section_type)

    sections = load_sections(constitution_id)

    section = ConstitutionSection()
    section.constitution_id = constitution_id
    section.type = section_type
    section.parent_id = parent_id or None
    section.title = default_title(section_type, section.parent_id, sections)
    section.content = ""
    section.last_modified_by = actor_id

    # 🔒 Domain invariants (single source of truth)
    assert_section(section, sections)

    with transactional():
        section.order = next_sibling_order(
            constitution_id=constitution_id,
            parent_id=section.parent_id,
        )

        db.session.add(section)
        db.session.flush()  # ensures section.id exists

        refresh_numbering_cache([*sections, section])

    current_app.logger.info(
        "Created %s %s in constitution %s", section.type, section.id, constitution_id
    )

    record_audit_entry(
        constitution_id=constitution_id,
        change_kind="create",
        section_id=section.id,
        actor_id=actor_id,
        actor_name=actor_name,
        after=audit_snapshot(section),
    )

    return section
