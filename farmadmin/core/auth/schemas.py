"""Typed schemas for admin authentication."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)


@dataclass(frozen=True)
class AdminSession:
    """Identity of the administrator making the current request."""

    user_id: int
    email: str
    admin_since: Optional[datetime] = None
