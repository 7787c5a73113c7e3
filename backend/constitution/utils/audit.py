from flask import current_app, has_request_context, request
from constitution.extensions import db
from constitution.domain.audit_diff import describe_change
from constitution.models.audit_log import ConstitutionAuditEntry
from typing import Optional
from .transaction import transactional

def record_audit_entry(
    *,
    constitution_id: str,
    change_kind: str,
    section_id: Optional[str],
    actor_id: str,
    actor_name: str,
    before: dict | None = None,
    after: dict | None = None,
) -> Optional[ConstitutionAuditEntry]:
    """
    Append an audit entry in its own transaction.

    Runs after the primary change has committed. A failure here is logged and
    swallowed; it never undoes the change being audited.
    """
    try:
        entry = ConstitutionAuditEntry()

        entry.constitution_id = constitution_id
        entry.section_id = section_id
        entry.change_kind = change_kind
        entry.description = describe_change(change_kind, before, after)
        entry.before_value = before
        entry.after_value = after
        entry.actor_id = actor_id
        entry.actor_name = actor_name or "Unknown User"

        if has_request_context():
            entry.user_agent = (request.user_agent.string or None)

        with transactional():
            db.session.add(entry)

        return entry
    except Exception:
        current_app.logger.exception(
            "Failed to write %s audit entry for section %s", change_kind, section_id
        )
        return None
