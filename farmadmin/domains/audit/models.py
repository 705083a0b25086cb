"""Audit trail of administrative actions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from farmadmin.extensions import db


class AuditLog(db.Model):
    __tablename__ = "audit_log"
    __table_args__ = (db.Index("ix_audit_log_created", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id", ondelete="SET NULL"))
    # Plain column: rows outlive the farm they describe.
    farm_id: Mapped[int | None] = mapped_column()
    action: Mapped[str] = mapped_column(db.String(64), nullable=False)
    resource_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(db.String(64))
    old_values: Mapped[dict | None] = mapped_column(db.JSON)
    new_values: Mapped[dict | None] = mapped_column(db.JSON)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
