# constitution/normalizers/audit.py
from __future__ import annotations

from typing import Dict, Any
from constitution.models.audit_log import ConstitutionAuditEntry


def normalize_audit_entry(entry: ConstitutionAuditEntry) -> Dict[str, Any]:
    """
    Normalizes an audit entry into API-safe JSON.

    Notes:
    - before/after are omitted when absent (create has no before, delete no after)
    - timestamp is the entry's creation time
    """

    if not entry:
        raise ValueError("Audit entry cannot be None")

    data = {
        "id": entry.id,
        "constitution_id": entry.constitution_id,
        "section_id": entry.section_id,
        "change_kind": entry.change_kind,
        "description": entry.description,
        "actor_id": entry.actor_id,
        "actor_name": entry.actor_name,
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
    }

    if entry.before_value is not None:
        data["before"] = entry.before_value
    if entry.after_value is not None:
        data["after"] = entry.after_value

    return data
