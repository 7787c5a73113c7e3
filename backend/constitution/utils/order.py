from constitution.extensions import db
from constitution.models.section import ConstitutionSection

def next_sibling_order(*, constitution_id, parent_id=None):
    """
    max(order) + 1 within the sibling group sharing `parent_id`.
    Top-level sections (no parent) form one group.
    """
    max_order = db.session.query(db.func.max(ConstitutionSection.order))\
        .filter_by(constitution_id=constitution_id, parent_id=parent_id)\
        .scalar()

    return 1 if max_order is None else max_order + 1


def swap_order(first, second):
    first.order, second.order = second.order, first.order


def compact_order(items, order_field="order"):
    """
    Re-assigns sequential order values (1..N) to an already ordered sibling
    group. Rows that already hold their value are left untouched.
    """
    for index, item in enumerate(items, start=1):
        if getattr(item, order_field) != index:
            setattr(item, order_field, index)
