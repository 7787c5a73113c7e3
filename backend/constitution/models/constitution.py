from constitution.extensions import db
from .base import BaseModel

class Constitution(BaseModel):
    __tablename__ = "constitutions"

    # Human-chosen slug ids are allowed, e.g. "ieee-ucsd-constitution"
    id = db.Column(db.String(64), primary_key=True)

    title = db.Column(db.String(255), nullable=False)
    organization_name = db.Column(db.String(255), nullable=False)
    version = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(db.String(20), nullable=False, default="draft", index=True)
    last_modified_by = db.Column(db.String(36), nullable=True)

    sections = db.relationship(
        "ConstitutionSection",
        back_populates="constitution",
        order_by="ConstitutionSection.order",
    )
