from constitution.extensions import db
from .base import BaseModel
from .constitution_mixin import ConstitutionMixin

class ConstitutionSection(BaseModel, ConstitutionMixin):
    __tablename__ = "constitution_sections"

    type = db.Column(db.String(20), nullable=False)  # preamble, article, section, subsection, amendment
    title = db.Column(db.String(500), nullable=True, default="")
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Float, nullable=False, default=0)

    # Plain column, not a foreign key: deleting a parent leaves children pointing at it
    parent_id = db.Column(db.String(36), nullable=True, index=True)

    # Positional cache, rewritten after every mutation. Never read as ground truth.
    article_number = db.Column(db.Integer, nullable=True)
    section_number = db.Column(db.Integer, nullable=True)
    subsection_letter = db.Column(db.String(50), nullable=True)
    amendment_number = db.Column(db.Integer, nullable=True)

    last_modified_by = db.Column(db.String(36), nullable=True)

    # Row version; every UPDATE is a compare-and-swap on it
    version_id = db.Column(db.Integer, nullable=False)

    constitution = db.relationship("Constitution", back_populates="sections")

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        db.Index("idx_section_sibling_order", "constitution_id", "parent_id", "order"),
    )
