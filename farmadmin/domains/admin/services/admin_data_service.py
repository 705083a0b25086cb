"""Data backend for the admin console.

Every read returns a complete dataset or raises ``DataBackendError``; there
are no partial results and no silent fallbacks to empty data. Writes record
an audit entry in the same transaction as the change.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from farmadmin.core.auth.models import AdminUser
from farmadmin.core.gate.errors import DataBackendError
from farmadmin.core.users.models import User
from farmadmin.core.utils.pagination import PageWindow, window_query
from farmadmin.domains.admin.mappers import map_audit_entry, map_farm, map_member, map_user_role
from farmadmin.domains.admin.models import SystemSetting
from farmadmin.domains.admin.schemas.admin_schemas import (
    ANALYTICS_RANGES,
    AnalyticsSummary,
    AuditLogEntry,
    BillingOverview,
    FarmDetails,
    FarmPage,
    GrowthMetric,
    SubscriptionRecord,
    SystemOverview,
    TopFarm,
    UserDetails,
    UserPage,
)
from farmadmin.domains.audit.models import AuditLog
from farmadmin.domains.farms.models.farm_models import (
    PLAN_TYPES,
    ROLE_STATUSES,
    ROLE_TYPE_OWNER,
    SUBSCRIPTION_STATUSES,
    Animal,
    BillingSubscription,
    Farm,
    FarmRole,
)
from farmadmin.extensions import db

logger = logging.getLogger(__name__)

DEFAULT_FARMS_LIMIT = 50
DEFAULT_AUDIT_LIMIT = 100
DEFAULT_USERS_LIMIT = 50
TOP_FARMS_LIMIT = 5
SIGNUP_WINDOW_DAYS = 30
FALLBACK_RANGE_DAYS = 365


@contextmanager
def data_backend(operation: str) -> Iterator[None]:
    """Wrap database failures of ``operation`` in ``DataBackendError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("%s failed: %s", operation, exc)
        raise DataBackendError(f"{operation} failed") from exc


def _count(model, *criteria) -> int:
    return db.session.query(func.count(model.id)).filter(*criteria).scalar() or 0


def _growth(current: int, previous: int) -> GrowthMetric:
    change = 0
    if previous:
        # Round half up to whole percent.
        change = int(math.floor((current - previous) / previous * 100 + 0.5))
    return GrowthMetric(current=current, previous=previous, change=change)


def _active_revenue() -> tuple[int, Decimal]:
    count, total = (
        db.session.query(
            func.count(BillingSubscription.id),
            func.coalesce(func.sum(BillingSubscription.monthly_price), 0),
        )
        .filter(BillingSubscription.status == "active")
        .one()
    )
    return int(count or 0), Decimal(str(total or 0))


# --- Page datasets ---


def get_analytics_data(time_range: str = "30d", *, now: Optional[datetime] = None) -> AnalyticsSummary:
    """Growth of users, farms and herds over ``time_range`` vs the period before.

    Unknown ranges cover the last year.
    """
    days = ANALYTICS_RANGES.get(time_range, FALLBACK_RANGE_DAYS)
    now = now or datetime.utcnow()
    start = now - timedelta(days=days)
    previous_start = now - timedelta(days=days * 2)

    with data_backend("get_analytics_data"):
        current_users = _count(FarmRole, FarmRole.created_at >= start)
        previous_users = _count(
            FarmRole, FarmRole.created_at >= previous_start, FarmRole.created_at < start
        )
        current_farms = _count(Farm, Farm.created_at >= start)
        previous_farms = _count(Farm, Farm.created_at >= previous_start, Farm.created_at < start)
        current_animals = _count(Animal, Animal.created_at >= start)
        active_subscriptions, revenue = _active_revenue()
        top_farms = _top_farms()

    return AnalyticsSummary(
        time_range=time_range,
        period_start=start,
        user_growth=_growth(current_users, previous_users),
        farm_growth=_growth(current_farms, previous_farms),
        animal_tracking=GrowthMetric(current=current_animals),
        active_subscriptions=active_subscriptions,
        monthly_revenue=revenue,
        top_farms=top_farms,
    )


def _top_farms() -> List[TopFarm]:
    animal_counts = (
        db.session.query(Animal.farm_id, func.count(Animal.id).label("n"))
        .group_by(Animal.farm_id)
        .subquery()
    )
    role_counts = (
        db.session.query(FarmRole.farm_id, func.count(FarmRole.id).label("n"))
        .group_by(FarmRole.farm_id)
        .subquery()
    )
    animals = func.coalesce(animal_counts.c.n, 0)
    team = func.coalesce(role_counts.c.n, 0)
    rows = (
        db.session.query(Farm.id, Farm.name, animals, team)
        .outerjoin(animal_counts, animal_counts.c.farm_id == Farm.id)
        .outerjoin(role_counts, role_counts.c.farm_id == Farm.id)
        .order_by(desc(animals), Farm.id)
        .limit(TOP_FARMS_LIMIT)
        .all()
    )
    return [TopFarm(id=r[0], name=r[1], animals=int(r[2]), team_size=int(r[3])) for r in rows]


def get_audit_logs(limit: int = DEFAULT_AUDIT_LIMIT) -> List[AuditLogEntry]:
    """Most recent audit entries, newest first."""
    window = PageWindow(limit=limit)
    with data_backend("get_audit_logs"):
        rows = (
            AuditLog.query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(window.limit)
            .all()
        )
        return [map_audit_entry(row) for row in rows]


def get_all_farms(limit: int = DEFAULT_FARMS_LIMIT, offset: int = 0) -> FarmPage:
    """One window of owned farms, newest first, with the total owned-farm count."""
    window = PageWindow(limit=limit, offset=offset)
    query = (
        Farm.query.options(selectinload(Farm.profile), selectinload(Farm.roles))
        .filter(Farm.roles.any(FarmRole.role_type == ROLE_TYPE_OWNER))
        .order_by(Farm.created_at.desc(), Farm.id.desc())
    )
    with data_backend("get_all_farms"):
        farms, total = window_query(query, window)
        return FarmPage(items=[map_farm(f) for f in farms], total_count=total)


def get_system_overview(*, now: Optional[datetime] = None) -> SystemOverview:
    """Platform-wide totals for the dashboard."""
    now = now or datetime.utcnow()
    with data_backend("get_system_overview"):
        total_farms = _count(Farm)
        total_animals = _count(Animal)
        total_users = _count(FarmRole)
        signups = _count(FarmRole, FarmRole.created_at >= now - timedelta(days=SIGNUP_WINDOW_DAYS))
        active_subscriptions, revenue = _active_revenue()

    average = int(math.floor(total_animals / total_farms + 0.5)) if total_farms else 0
    return SystemOverview(
        total_farms=total_farms,
        total_users=total_users,
        total_animals=total_animals,
        active_subscriptions=active_subscriptions,
        last_30_days_signups=signups,
        monthly_revenue=revenue,
        average_animals_per_farm=average,
    )


def get_farm_details(farm_id: int) -> Optional[FarmDetails]:
    with data_backend("get_farm_details"):
        farm = db.session.get(
            Farm,
            farm_id,
            options=[selectinload(Farm.profile), selectinload(Farm.roles), selectinload(Farm.subscriptions)],
        )
        if farm is None:
            return None
        animal_count = _count(Animal, Animal.farm_id == farm.id)
        return FarmDetails(
            farm=map_farm(farm),
            members=[map_member(r) for r in farm.roles],
            animal_count=animal_count,
            subscriptions=[SubscriptionRecord.model_validate(s) for s in farm.subscriptions],
        )


# --- Administrative actions ---


def log_admin_action(
    actor_id: Optional[int],
    action: str,
    resource_type: str,
    resource_id: Any,
    *,
    farm_id: Optional[int] = None,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Stage an audit entry in the current transaction (caller commits)."""
    entry = AuditLog(
        user_id=actor_id,
        farm_id=farm_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        old_values=old_values,
        new_values=new_values,
    )
    db.session.add(entry)
    return entry


def suspend_farm(farm_id: int, *, actor_id: Optional[int]) -> bool:
    """Suspend a farm and every role on it. False when the farm does not exist."""
    with data_backend("suspend_farm"):
        farm = db.session.get(Farm, farm_id)
        if farm is None:
            return False
        previous = farm.status
        farm.status = "suspended"
        for role in farm.roles:
            role.status = "suspended"
        log_admin_action(
            actor_id,
            "suspend_farm",
            "farm",
            farm.id,
            farm_id=farm.id,
            old_values={"status": previous},
            new_values={"status": "suspended", "updated_at": datetime.utcnow().isoformat()},
        )
        db.session.commit()
    logger.info("Farm %s suspended by uid=%s", farm_id, actor_id)
    return True


def delete_farm(farm_id: int, *, actor_id: Optional[int]) -> bool:
    """Delete a farm with its dependent rows. False when the farm does not exist."""
    with data_backend("delete_farm"):
        farm = db.session.get(Farm, farm_id)
        if farm is None:
            return False
        log_admin_action(
            actor_id,
            "delete_farm",
            "farm",
            farm.id,
            farm_id=farm.id,
            old_values={"name": farm.name, "status": farm.status},
        )
        db.session.delete(farm)
        db.session.commit()
    logger.info("Farm %s deleted by uid=%s", farm_id, actor_id)
    return True


def set_user_status(
    user_id: int, status: str, *, actor_id: Optional[int], reason: Optional[str] = None
) -> Optional[int]:
    """Set the status of all farm roles held by a user.

    Returns the number of roles changed, or None when the user does not exist.
    """
    if status not in ROLE_STATUSES:
        raise ValueError("invalid_status")
    new_values: Dict[str, Any] = {"status": status, "updated_at": datetime.utcnow().isoformat()}
    if reason:
        new_values["reason"] = reason
    with data_backend("set_user_status"):
        if db.session.get(User, user_id) is None:
            return None
        roles = FarmRole.query.filter_by(user_id=user_id).all()
        for role in roles:
            role.status = status
        log_admin_action(
            actor_id,
            "activate_user" if status == "active" else "suspend_user",
            "user",
            user_id,
            new_values=new_values,
        )
        db.session.commit()
    logger.info("User %s set to %s by uid=%s", user_id, status, actor_id)
    return len(roles)


# --- Users ---


def get_all_users(limit: int = DEFAULT_USERS_LIMIT, offset: int = 0) -> UserPage:
    """One window of farm roles with their user and farm, newest first."""
    window = PageWindow(limit=limit, offset=offset)
    query = FarmRole.query.options(selectinload(FarmRole.farm)).order_by(
        FarmRole.created_at.desc(), FarmRole.id.desc()
    )
    with data_backend("get_all_users"):
        roles, total = window_query(query, window)
        return UserPage(items=[map_user_role(r) for r in roles], total_count=total)


def get_user_details(user_id: int) -> Optional[UserDetails]:
    with data_backend("get_user_details"):
        user = db.session.get(User, user_id)
        if user is None:
            return None
        roles = (
            FarmRole.query.options(selectinload(FarmRole.farm))
            .filter_by(user_id=user_id)
            .order_by(FarmRole.created_at.desc(), FarmRole.id.desc())
            .all()
        )
        is_admin = AdminUser.query.filter_by(user_id=user_id).first() is not None
        return UserDetails(
            user_id=user.id,
            email=user.email,
            full_name=user.full_name,
            is_active=user.is_active,
            is_admin=is_admin,
            created_at=user.created_at,
            roles=[map_user_role(r) for r in roles],
        )


# --- Billing ---


def get_billing_overview() -> BillingOverview:
    """Subscription counts by status, MRR and active plans per plan type."""
    with data_backend("get_billing_overview"):
        rows = (
            db.session.query(
                BillingSubscription.plan_type,
                BillingSubscription.status,
                func.count(BillingSubscription.id),
            )
            .group_by(BillingSubscription.plan_type, BillingSubscription.status)
            .all()
        )
        _, mrr = _active_revenue()

    by_status: Dict[str, int] = defaultdict(int)
    plans: Dict[str, int] = {plan: 0 for plan in PLAN_TYPES}
    for plan_type, status, count in rows:
        by_status[status] += count
        if status == "active":
            plans[plan_type] = plans.get(plan_type, 0) + count
    return BillingOverview(
        total_subscriptions=sum(by_status.values()),
        active=by_status["active"],
        cancelled=by_status["cancelled"],
        past_due=by_status["past_due"],
        total_mrr=mrr,
        plan_breakdown=plans,
    )


def update_subscription_status(
    subscription_id: int, status: str, *, actor_id: Optional[int]
) -> Optional[SubscriptionRecord]:
    """Change a subscription's status. None when it does not exist."""
    if status not in SUBSCRIPTION_STATUSES:
        raise ValueError("invalid_status")
    with data_backend("update_subscription_status"):
        subscription = db.session.get(BillingSubscription, subscription_id)
        if subscription is None:
            return None
        previous = subscription.status
        subscription.status = status
        log_admin_action(
            actor_id,
            "update_subscription",
            "billing_subscription",
            subscription.id,
            farm_id=subscription.farm_id,
            old_values={"status": previous},
            new_values={"status": status},
        )
        db.session.commit()
        return SubscriptionRecord.model_validate(subscription)


# --- System settings ---


def get_settings() -> Dict[str, Any]:
    with data_backend("get_settings"):
        return {row.key: row.value for row in SystemSetting.query.order_by(SystemSetting.key)}


def update_settings(settings: Dict[str, Any], *, actor_id: Optional[int]) -> Dict[str, Any]:
    """Upsert the given settings and return the full settings map."""
    if not settings:
        raise ValueError("no_settings")
    with data_backend("update_settings"):
        old_values: Dict[str, Any] = {}
        for key, value in settings.items():
            row = db.session.get(SystemSetting, key)
            if row is None:
                row = SystemSetting(key=key)
                db.session.add(row)
            old_values[key] = row.value
            row.value = value
            row.updated_by = actor_id
        log_admin_action(
            actor_id,
            "update_settings",
            "system_settings",
            None,
            old_values=old_values,
            new_values=dict(settings),
        )
        db.session.commit()
    logger.info("Settings %s updated by uid=%s", sorted(settings), actor_id)
    return get_settings()
