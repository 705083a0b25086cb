"""Support tickets raised by or on behalf of farm users."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmadmin.core.users.models import TimestampMixin
from farmadmin.extensions import db

TICKET_STATUSES = ("open", "in_progress", "resolved", "closed")
TICKET_PRIORITIES = ("low", "medium", "high", "urgent")


class SupportTicket(db.Model, TimestampMixin):
    __tablename__ = "support_ticket"
    __table_args__ = (db.Index("ix_support_ticket_status_priority", "status", "priority"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    ticket_number: Mapped[str] = mapped_column(db.String(32), unique=True, nullable=False)
    subject: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False)
    priority: Mapped[str] = mapped_column(db.String(16), default="medium", nullable=False)
    status: Mapped[str] = mapped_column(db.String(16), default="open", nullable=False)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id", ondelete="SET NULL"))
    farm_id: Mapped[int | None] = mapped_column(db.ForeignKey("farm.id", ondelete="SET NULL"))
    assigned_to: Mapped[int | None] = mapped_column(db.ForeignKey("user.id", ondelete="SET NULL"))

    farm = relationship("Farm", lazy="joined")
    requester = relationship("User", foreign_keys=[user_id], lazy="joined")
