from constitution.extensions import db

class ConstitutionMixin:
    constitution_id = db.Column(
        db.String(64),
        db.ForeignKey("constitutions.id"),
        nullable=False,
        index=True
    )
