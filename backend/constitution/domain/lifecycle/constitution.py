from typing import Set

from ..invariants.exceptions import InvariantViolation

CONSTITUTION_STATUSES = ("draft", "published", "archived")

# Explicit allowed state transitions
ALLOWED_CONSTITUTION_TRANSITIONS: dict[str, Set[str]] = {
    "draft": {"published"},
    "published": {"draft", "archived"},
    "archived": set(),
}

def assert_constitution_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards constitution lifecycle transitions.
    Single source of truth for status changes.
    """
    if from_status == to_status:
        return

    allowed = ALLOWED_CONSTITUTION_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise InvariantViolation(
            f"Illegal constitution transition: {from_status} → {to_status}"
        )
