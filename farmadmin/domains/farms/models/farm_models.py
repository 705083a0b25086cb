"""Farm, membership, herd and billing models."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmadmin.core.users.models import TimestampMixin
from farmadmin.extensions import db

ROLE_TYPE_OWNER = "farm_owner"
ROLE_STATUSES = ("active", "suspended", "inactive", "pending_setup")
SUBSCRIPTION_STATUSES = ("active", "cancelled", "past_due")
PLAN_TYPES = ("starter", "professional", "enterprise")


class Farm(db.Model, TimestampMixin):
    __tablename__ = "farm"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(db.String(255))
    farm_type: Mapped[str | None] = mapped_column(db.String(64))
    status: Mapped[str] = mapped_column(db.String(32), default="active", nullable=False)

    profile: Mapped["FarmProfile | None"] = relationship(
        "FarmProfile", back_populates="farm", uselist=False, cascade="all, delete-orphan"
    )
    roles: Mapped[list["FarmRole"]] = relationship(
        "FarmRole", back_populates="farm", cascade="all, delete-orphan"
    )
    animals: Mapped[list["Animal"]] = relationship(
        "Animal", back_populates="farm", cascade="all, delete-orphan"
    )
    subscriptions: Mapped[list["BillingSubscription"]] = relationship(
        "BillingSubscription", back_populates="farm", cascade="all, delete-orphan"
    )

    @property
    def owner_role(self) -> "FarmRole | None":
        return next((r for r in self.roles if r.role_type == ROLE_TYPE_OWNER), None)


class FarmProfile(db.Model, TimestampMixin):
    __tablename__ = "farm_profile"

    id: Mapped[int] = mapped_column(primary_key=True)
    farm_id: Mapped[int] = mapped_column(db.ForeignKey("farm.id"), unique=True, nullable=False)
    herd_size: Mapped[int | None] = mapped_column()
    onboarding_completed: Mapped[bool] = mapped_column(default=False)

    farm: Mapped[Farm] = relationship("Farm", back_populates="profile")


class FarmRole(db.Model, TimestampMixin):
    """A user's role on a farm (owner, manager, worker...)."""

    __tablename__ = "farm_role"
    __table_args__ = (db.Index("ix_farm_role_farm_type", "farm_id", "role_type"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    farm_id: Mapped[int] = mapped_column(db.ForeignKey("farm.id"), nullable=False)
    role_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    status: Mapped[str] = mapped_column(db.String(32), default="active", nullable=False)

    farm: Mapped[Farm] = relationship("Farm", back_populates="roles")
    user = relationship("User", lazy="joined")


class Animal(db.Model, TimestampMixin):
    __tablename__ = "animal"

    id: Mapped[int] = mapped_column(primary_key=True)
    farm_id: Mapped[int] = mapped_column(db.ForeignKey("farm.id"), index=True, nullable=False)
    tag_number: Mapped[str] = mapped_column(db.String(64), nullable=False)
    name: Mapped[str | None] = mapped_column(db.String(128))

    farm: Mapped[Farm] = relationship("Farm", back_populates="animals")


class BillingSubscription(db.Model, TimestampMixin):
    __tablename__ = "billing_subscription"

    id: Mapped[int] = mapped_column(primary_key=True)
    farm_id: Mapped[int] = mapped_column(db.ForeignKey("farm.id"), index=True, nullable=False)
    plan_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    status: Mapped[str] = mapped_column(db.String(32), default="active", nullable=False)
    monthly_price: Mapped[Decimal] = mapped_column(db.Numeric(10, 2), default=Decimal("0"))

    farm: Mapped[Farm] = relationship("Farm", back_populates="subscriptions")


__all__ = [
    "Animal",
    "BillingSubscription",
    "Farm",
    "FarmProfile",
    "FarmRole",
    "PLAN_TYPES",
    "ROLE_STATUSES",
    "ROLE_TYPE_OWNER",
    "SUBSCRIPTION_STATUSES",
]
