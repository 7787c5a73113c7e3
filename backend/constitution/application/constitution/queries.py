from typing import List
from constitution.models.section import ConstitutionSection


def load_sections(constitution_id: str) -> List[ConstitutionSection]:
    """Every section of a constitution, ordered by `order` (ties by creation)."""
    return (
        ConstitutionSection.query
        .filter_by(constitution_id=constitution_id)
        .order_by(
            ConstitutionSection.order.asc(),
            ConstitutionSection.created_at.asc(),
            ConstitutionSection.id.asc(),
        )
        .all()
    )


def get_section_or_404(constitution_id: str, section_id: str) -> ConstitutionSection:
    return (
        ConstitutionSection.query
        .filter_by(id=section_id, constitution_id=constitution_id)
        .first_or_404(description="Section not found")
    )
