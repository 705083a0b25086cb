"""Platform-wide settings edited from the admin console."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Mapped, mapped_column

from farmadmin.extensions import db


class SystemSetting(db.Model):
    """One named platform setting; the value is any JSON document."""

    __tablename__ = "system_setting"

    key: Mapped[str] = mapped_column(db.String(64), primary_key=True)
    value: Mapped[Any] = mapped_column(db.JSON, nullable=True)
    updated_by: Mapped[int | None] = mapped_column(db.ForeignKey("user.id", ondelete="SET NULL"))
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
