# constitution/application/constitution/move_section.py
from typing import Any, Dict
from flask import current_app
from constitution.domain.audit_diff import audit_snapshot
from constitution.domain.hierarchy import children_of
from constitution.domain.invariants.exceptions import MoveRejected
from constitution.domain.invariants.section import assert_section
from constitution.domain.reorder import plan_relocation, plan_swap
from constitution.utils.audit import record_audit_entry
from constitution.utils.numbering_cache import refresh_numbering_cache
from constitution.utils.order import compact_order, swap_order
from constitution.utils.transaction import transactional
from .queries import get_section_or_404, load_sections


def move_section(
    *,
    constitution_id: str,
    section_id: str,
    direction: str,
    actor_id: str,
    actor_name: str,
) -> Dict[str, Any]:
    """
    Swap a section with its previous/next sibling.

    Responsibilities:
    - Both order writes commit together or not at all
    - Row versions turn a concurrent edit into a ConcurrencyConflict
    - One reorder audit entry per affected section
    """
    section = get_section_or_404(constitution_id, section_id)
    sections = load_sections(constitution_id)

    # 1️⃣ Resolve the sibling to swap with
    plan = plan_swap(section, sections, direction)

    if plan.is_noop:
        current_app.logger.info("Move %s of section %s ignored: %s", direction, section_id, plan.reason)
        return {"moved": False, "reason": plan.reason}

    neighbour = plan.neighbour
    before_section = audit_snapshot(section)
    before_neighbour = audit_snapshot(neighbour)

    # 2️⃣ Swap inside a single transaction
    with transactional():
        # Tied orders would swap to the same values
        if section.order == neighbour.order:
            current_app.logger.info(
                "Compacting sibling order under %s before moving section %s",
                section.parent_id, section_id,
            )
            compact_order(children_of(section.parent_id, sections))

        swap_order(section, neighbour)
        section.last_modified_by = actor_id
        neighbour.last_modified_by = actor_id

        refresh_numbering_cache(sections)

    current_app.logger.info(
        "Moved section %s %s (swapped with %s)", section_id, direction, neighbour.id
    )

    # 3️⃣ Audit both sides of the swap
    for moved, before in ((section, before_section), (neighbour, before_neighbour)):
        record_audit_entry(
            constitution_id=constitution_id,
            change_kind="reorder",
            section_id=moved.id,
            actor_id=actor_id,
            actor_name=actor_name,
            before=before,
            after=audit_snapshot(moved),
        )

    return {"moved": True, "swapped_with": neighbour.id}


def relocate_section(
    *,
    constitution_id: str,
    section_id: str,
    destination_index: int,
    actor_id: str,
    actor_name: str,
):
    """
    Drop a section at a position of the flattened display order.

    The drop is validated first; a rejected drop raises MoveRejected and
    changes nothing. An accepted drop re-parents the section and slots its
    order after the nearest preceding sibling of the new group.
    """
    section = get_section_or_404(constitution_id, section_id)
    sections = load_sections(constitution_id)

    try:
        parent_id, order = plan_relocation(section, destination_index, sections)
    except MoveRejected as exc:
        current_app.logger.warning("Rejected relocation of section %s: %s", section_id, exc)
        raise

    before = audit_snapshot(section)

    with transactional():
        section.parent_id = parent_id
        section.order = order
        section.last_modified_by = actor_id

        assert_section(section, sections)
        refresh_numbering_cache(sections)

    current_app.logger.info(
        "Relocated section %s under %s at order %s", section_id, parent_id, order
    )

    record_audit_entry(
        constitution_id=constitution_id,
        change_kind="reorder",
        section_id=section.id,
        actor_id=actor_id,
        actor_name=actor_name,
        before=before,
        after=audit_snapshot(section),
    )

    return section
