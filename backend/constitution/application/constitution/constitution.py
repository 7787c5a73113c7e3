# constitution/application/constitution/constitution.py
from typing import Any, Dict, Optional
from flask import current_app
from constitution.extensions import db
from constitution.models.constitution import Constitution
from constitution.domain.invariants.exceptions import InvariantViolation
from constitution.domain.lifecycle.constitution import (
    CONSTITUTION_STATUSES,
    assert_constitution_transition,
)
from constitution.utils.transaction import transactional


def ensure_constitution(
    *,
    constitution_id: str,
    title: str,
    organization_name: str,
) -> Constitution:
    """Load a constitution, creating an empty draft on first access."""
    constitution = db.session.get(Constitution, constitution_id)
    if constitution:
        return constitution

    constitution = Constitution()
    constitution.id = constitution_id
    constitution.title = title
    constitution.organization_name = organization_name
    constitution.version = 1
    constitution.status = "draft"

    with transactional():
        db.session.add(constitution)

    current_app.logger.info("Initialized constitution %s", constitution_id)
    return constitution


def update_constitution(
    *,
    constitution_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> Constitution:
    """
    Update the document-level fields (title, version, status).

    Status changes go through the lifecycle guard.
    """
    constitution = db.session.get(Constitution, constitution_id)
    if not constitution:
        raise InvariantViolation(f"Constitution {constitution_id} does not exist")

    if "version" in data:
        version = data["version"]
        if isinstance(version, bool) or not isinstance(version, int) or version < 1:
            raise InvariantViolation("version must be a positive integer")

    if "status" in data and data["status"] not in CONSTITUTION_STATUSES:
        raise InvariantViolation(f"Invalid status: {data['status']!r}")

    changed_fields: list[str] = []

    with transactional():
        if "status" in data:
            assert_constitution_transition(
                from_status=constitution.status,
                to_status=data["status"],
            )

        for field in ("title", "organization_name", "version", "status"):
            if field in data and getattr(constitution, field) != data[field]:
                setattr(constitution, field, data[field])
                changed_fields.append(field)

        if not changed_fields:
            raise InvariantViolation("No valid fields provided for update")

        constitution.last_modified_by = actor_id

    current_app.logger.info(
        "Updated constitution %s (%s)", constitution_id, ", ".join(changed_fields)
    )
    return constitution


def resolve_constitution(constitution_id: Optional[str] = None) -> Optional[Constitution]:
    """
    The constitution a request works on.

    Only the configured default is created on first access; any other id
    must already exist (None otherwise).
    """
    default_id = current_app.config["DEFAULT_CONSTITUTION_ID"]
    constitution_id = constitution_id or default_id

    if constitution_id == default_id:
        return ensure_constitution(
            constitution_id=default_id,
            title=current_app.config["DEFAULT_CONSTITUTION_TITLE"],
            organization_name=current_app.config["DEFAULT_ORGANIZATION_NAME"],
        )

    return db.session.get(Constitution, constitution_id)
