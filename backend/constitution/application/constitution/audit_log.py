# constitution/application/constitution/audit_log.py
from typing import List, Optional
from constitution.models.audit_log import ConstitutionAuditEntry

DEFAULT_READ_LIMIT = 100


def _matches_text(entry: ConstitutionAuditEntry, needle: str) -> bool:
    haystacks = [
        entry.description,
        (entry.before_value or {}).get("title"),
        (entry.after_value or {}).get("title"),
    ]
    return any(needle in (text or "").lower() for text in haystacks)


def list_audit_entries(
    *,
    constitution_id: str,
    actor_id: Optional[str] = None,
    change_kind: Optional[str] = None,
    text: Optional[str] = None,
    limit: int = DEFAULT_READ_LIMIT,
) -> List[ConstitutionAuditEntry]:
    """
    Most recent audit entries, newest first.

    Only the latest `limit` entries are loaded; the actor / change kind / text
    filters are applied to that window afterwards.
    """
    entries = (
        ConstitutionAuditEntry.query
        .filter_by(constitution_id=constitution_id)
        .order_by(
            ConstitutionAuditEntry.created_at.desc(),
            ConstitutionAuditEntry.id.desc(),
        )
        .limit(limit)
        .all()
    )

    if actor_id:
        entries = [e for e in entries if e.actor_id == actor_id]

    if change_kind:
        entries = [e for e in entries if e.change_kind == change_kind]

    needle = (text or "").strip().lower()
    if needle:
        entries = [e for e in entries if _matches_text(e, needle)]

    return entries
