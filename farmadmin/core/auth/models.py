"""Admin membership model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmadmin.core.users.models import TimestampMixin, User
from farmadmin.extensions import db


class AdminUser(db.Model, TimestampMixin):
    """Marks a user as a platform administrator."""

    __tablename__ = "admin_user"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), unique=True, nullable=False)

    user: Mapped[User] = relationship("User")

    @property
    def admin_since(self) -> datetime:
        return self.created_at
