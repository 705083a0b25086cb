"""Admin console datasets and request payloads."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from farmadmin.domains.farms.models.farm_models import SUBSCRIPTION_STATUSES

ANALYTICS_RANGES: Dict[str, int] = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}


class GrowthMetric(BaseModel):
    current: int = 0
    previous: int = 0
    change: int = 0  # whole percent vs previous period, 0 when previous is 0

    model_config = ConfigDict(frozen=True)


class TopFarm(BaseModel):
    id: int
    name: str
    animals: int
    team_size: int

    model_config = ConfigDict(frozen=True)


class AnalyticsSummary(BaseModel):
    time_range: str
    period_start: dt.datetime
    user_growth: GrowthMetric
    farm_growth: GrowthMetric
    animal_tracking: GrowthMetric
    active_subscriptions: int
    monthly_revenue: Decimal
    top_farms: List[TopFarm] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class AuditLogEntry(BaseModel):
    id: int
    user_id: Optional[int]
    farm_id: Optional[int]
    action: str
    resource_type: str
    resource_id: Optional[str]
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)


class FarmRecord(BaseModel):
    id: int
    name: str
    location: Optional[str]
    farm_type: Optional[str]
    status: str
    herd_size: Optional[int]
    onboarding_completed: bool
    owner_email: Optional[str]
    owner_name: Optional[str]
    created_at: dt.datetime

    model_config = ConfigDict(frozen=True)


class FarmPage(NamedTuple):
    """One window of the farm listing plus the size of the whole listing."""

    items: List[FarmRecord]
    total_count: int


class SystemOverview(BaseModel):
    total_farms: int
    total_users: int
    total_animals: int
    active_subscriptions: int
    last_30_days_signups: int
    monthly_revenue: Decimal
    average_animals_per_farm: int

    model_config = ConfigDict(frozen=True)


class FarmMember(BaseModel):
    user_id: int
    email: Optional[str]
    full_name: Optional[str]
    role_type: str
    status: str


class SubscriptionRecord(BaseModel):
    id: int
    plan_type: str
    status: str
    monthly_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class FarmDetails(BaseModel):
    farm: FarmRecord
    members: List[FarmMember]
    animal_count: int
    subscriptions: List[SubscriptionRecord]


class SuspendFarmRequest(BaseModel):
    farm_id: int = Field(gt=0)


class ActivateUserRequest(BaseModel):
    user_id: int = Field(gt=0)


class UserRoleRecord(BaseModel):
    """A user's role on one farm, as listed on the users page."""

    role_id: int
    user_id: int
    email: Optional[str]
    full_name: Optional[str]
    role_type: str
    status: str
    farm_id: int
    farm_name: Optional[str]
    created_at: dt.datetime

    model_config = ConfigDict(frozen=True)


class UserPage(NamedTuple):
    items: List[UserRoleRecord]
    total_count: int


class UserDetails(BaseModel):
    user_id: int
    email: str
    full_name: Optional[str]
    is_active: bool
    is_admin: bool
    created_at: dt.datetime
    roles: List[UserRoleRecord]


class SuspendUserRequest(BaseModel):
    user_id: int = Field(gt=0)
    reason: str = Field(min_length=1, max_length=500)


class BillingOverview(BaseModel):
    total_subscriptions: int
    active: int
    cancelled: int
    past_due: int
    total_mrr: Decimal
    # active subscriptions per plan type
    plan_breakdown: Dict[str, int]

    model_config = ConfigDict(frozen=True)


class SubscriptionStatusRequest(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def known_status(cls, value: str) -> str:
        if value not in SUBSCRIPTION_STATUSES:
            raise ValueError(f"status must be one of {', '.join(SUBSCRIPTION_STATUSES)}")
        return value


class SettingsUpdate(RootModel[Dict[str, Any]]):
    """A JSON object of setting name to new value."""

    @field_validator("root")
    @classmethod
    def named_settings(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if not value:
            raise ValueError("at least one setting is required")
        for key in value:
            if not key.strip() or len(key) > 64:
                raise ValueError(f"invalid setting name: {key!r}")
        return value
