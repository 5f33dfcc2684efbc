"""
Profile and identity models for prepMSCEIT
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Platform roles."""

    STUDENT = "student"
    ADMIN = "admin"


class ProfileStatus(str, Enum):
    """Account lifecycle status stored on the profile row."""

    INVITED = "invited"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Identity(BaseModel):
    """An authenticated identity as returned by the auth provider."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def onboarding_complete(self) -> bool:
        return self.user_metadata.get("onboarding_complete") is True

    @property
    def full_name(self) -> str:
        return self.user_metadata.get("full_name") or ""


class Profile(BaseModel):
    """Row of the profiles table."""

    id: str
    full_name: str | None = None
    role: str | None = None
    status: ProfileStatus | None = None
    goal: str | None = None
    experience_level: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
