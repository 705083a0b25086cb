"""ORM row to dataset mappers for the admin console."""

from __future__ import annotations

from farmadmin.domains.admin.schemas.admin_schemas import (
    AuditLogEntry,
    FarmMember,
    FarmRecord,
    UserRoleRecord,
)
from farmadmin.domains.audit.models import AuditLog
from farmadmin.domains.farms.models.farm_models import Farm, FarmRole


def map_farm(farm: Farm) -> FarmRecord:
    owner = farm.owner_role
    owner_user = owner.user if owner else None
    return FarmRecord(
        id=farm.id,
        name=farm.name,
        location=farm.location,
        farm_type=farm.farm_type,
        status=farm.status,
        herd_size=farm.profile.herd_size if farm.profile else None,
        onboarding_completed=bool(farm.profile and farm.profile.onboarding_completed),
        owner_email=owner_user.email if owner_user else None,
        owner_name=owner_user.full_name if owner_user else None,
        created_at=farm.created_at,
    )


def map_member(role: FarmRole) -> FarmMember:
    return FarmMember(
        user_id=role.user_id,
        email=role.user.email if role.user else None,
        full_name=role.user.full_name if role.user else None,
        role_type=role.role_type,
        status=role.status,
    )


def map_audit_entry(log: AuditLog) -> AuditLogEntry:
    return AuditLogEntry.model_validate(log)


def map_user_role(role: FarmRole) -> UserRoleRecord:
    return UserRoleRecord(
        role_id=role.id,
        user_id=role.user_id,
        email=role.user.email if role.user else None,
        full_name=role.user.full_name if role.user else None,
        role_type=role.role_type,
        status=role.status,
        farm_id=role.farm_id,
        farm_name=role.farm.name if role.farm else None,
        created_at=role.created_at,
    )
