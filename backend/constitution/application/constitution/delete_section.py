# constitution/application/constitution/delete_section.py
from flask import current_app
from constitution.extensions import db
from constitution.domain.audit_diff import audit_snapshot
from constitution.utils.audit import record_audit_entry
from constitution.utils.numbering_cache import refresh_numbering_cache
from constitution.utils.transaction import transactional
from .queries import get_section_or_404, load_sections


def delete_section(
    *,
    constitution_id: str,
    section_id: str,
    actor_id: str,
    actor_name: str,
) -> None:
    """
    Hard-delete a single section.

    Notes:
    - Children are NOT deleted; they keep a parent_id that no longer resolves
    - Remaining sections get their numbering cache recomputed
    """
    section = get_section_or_404(constitution_id, section_id)
    before = audit_snapshot(section)

    with transactional():
        db.session.delete(section)
        db.session.flush()

        remaining = [s for s in load_sections(constitution_id) if s.id != section_id]
        refresh_numbering_cache(remaining)

    current_app.logger.info("Deleted section %s", section_id)

    record_audit_entry(
        constitution_id=constitution_id,
        change_kind="delete",
        section_id=section_id,
        actor_id=actor_id,
        actor_name=actor_name,
        before=before,
    )
