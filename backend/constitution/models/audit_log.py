# constitution/models/audit_log.py
from constitution.extensions import db
from .base import BaseModel
from .constitution_mixin import ConstitutionMixin
from sqlalchemy import event


class ConstitutionAuditEntry(BaseModel, ConstitutionMixin):
    __tablename__ = "constitution_audit_log"

    __table_args__ = (
        db.Index("ix_audit_recent", "constitution_id", "created_at", "id"),
        db.Index("ix_audit_actor_kind", "constitution_id", "actor_id", "change_kind"),
    )

    section_id = db.Column(db.String(36), nullable=True, index=True)
    change_kind = db.Column(db.String(20), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)

    before_value = db.Column(db.JSON, nullable=True)
    after_value = db.Column(db.JSON, nullable=True)

    actor_id = db.Column(db.String(36), nullable=False, index=True)
    actor_name = db.Column(db.String(255), nullable=False)
    user_agent = db.Column(db.String(512), nullable=True)

    @property
    def timestamp(self):
        return self.created_at


@event.listens_for(ConstitutionAuditEntry, 'before_update')
@event.listens_for(ConstitutionAuditEntry, 'before_delete')
def prevent_audit_mutation(mapper, connection, target):
    raise RuntimeError("Audit entries are immutable")
