"""Support ticket datasets and request payloads."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from farmadmin.domains.support.models import TICKET_PRIORITIES, TICKET_STATUSES


def _check_priority(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in TICKET_PRIORITIES:
        raise ValueError(f"priority must be one of {', '.join(TICKET_PRIORITIES)}")
    return value


def _check_status(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in TICKET_STATUSES:
        raise ValueError(f"status must be one of {', '.join(TICKET_STATUSES)}")
    return value


class TicketRecord(BaseModel):
    id: int
    ticket_number: str
    subject: str
    description: str
    priority: str
    status: str
    user_id: Optional[int]
    requester_email: Optional[str]
    farm_id: Optional[int]
    farm_name: Optional[str]
    assigned_to: Optional[int]
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(frozen=True)


class TicketFilter(BaseModel):
    """Optional ``status``/``priority`` query filters for the ticket list."""

    status: Optional[str] = None
    priority: Optional[str] = None

    @field_validator("status")
    @classmethod
    def known_status(cls, value: Optional[str]) -> Optional[str]:
        return _check_status(value or None)

    @field_validator("priority")
    @classmethod
    def known_priority(cls, value: Optional[str]) -> Optional[str]:
        return _check_priority(value or None)


class CreateTicketRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    priority: str = "medium"
    user_id: Optional[int] = Field(default=None, gt=0)
    farm_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("priority")
    @classmethod
    def known_priority(cls, value: str) -> str:
        return _check_priority(value)


class UpdateTicketRequest(BaseModel):
    """Fields an admin may change on a ticket; at least one is required."""

    subject: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    priority: Optional[str] = None
    status: Optional[str] = None
    assigned_to: Optional[int] = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("priority")
    @classmethod
    def known_priority(cls, value: Optional[str]) -> Optional[str]:
        return _check_priority(value)

    @field_validator("status")
    @classmethod
    def known_status(cls, value: Optional[str]) -> Optional[str]:
        return _check_status(value)

    @model_validator(mode="after")
    def has_changes(self) -> "UpdateTicketRequest":
        changes = self.model_dump(exclude_unset=True)
        if not changes:
            raise ValueError("no changes given")
        # only the assignee may be cleared
        for name in ("subject", "description", "priority", "status"):
            if name in changes and changes[name] is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
