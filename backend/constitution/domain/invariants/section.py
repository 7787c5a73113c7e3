from ..hierarchy import ALLOWED_PARENT_TYPES, SECTION_TYPES, index_by_id, iter_ancestors
from .exceptions import InvariantViolation, StructuralIntegrityError


def assert_section_type(section_type):
    if section_type not in SECTION_TYPES:
        raise InvariantViolation(
            f"Invalid section type: {section_type!r}. Expected one of {', '.join(SECTION_TYPES)}."
        )


def assert_single_preamble(section, sections):
    if section.type != "preamble":
        return

    others = [s for s in sections if s.type == "preamble" and s.id != section.id]
    if others:
        raise InvariantViolation("A constitution can only have one preamble.")


def assert_parentage(section, sections):
    allowed = ALLOWED_PARENT_TYPES[section.type]

    if not allowed:
        if section.parent_id:
            raise InvariantViolation(f"A {section.type} cannot have a parent.")
        return

    if not section.parent_id:
        raise InvariantViolation(
            f"A {section.type} must be placed under a {' or '.join(sorted(allowed))}."
        )

    by_id = index_by_id(sections)
    parent = by_id.get(section.parent_id)

    if parent is None or parent.id == section.id:
        raise InvariantViolation(f"Parent section {section.parent_id} does not exist.")

    if parent.type not in allowed:
        raise InvariantViolation(
            f"A {section.type} cannot be placed under a {parent.type}."
        )

    try:
        for _ in iter_ancestors(section, by_id):
            pass
    except StructuralIntegrityError as exc:
        raise InvariantViolation(
            f"Placing section {section.id} under {section.parent_id} would create a cycle."
        ) from exc


def assert_section(section, sections):
    """Checks a section about to be written against the rest of its constitution."""
    assert_section_type(section.type)
    assert_single_preamble(section, sections)
    assert_parentage(section, sections)


def assert_children_compatible(section, sections):
    """After a type change, existing children must still accept the section as parent."""
    for child in sections:
        if child.parent_id != section.id or child.id == section.id:
            continue
        if section.type not in ALLOWED_PARENT_TYPES.get(child.type, set()):
            raise InvariantViolation(
                f"Cannot change type to {section.type}: "
                f"it still has a {child.type} underneath it."
            )
