"""User and authentication models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Enumeration of account roles."""

    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"


class User(BaseModel):
    """Authenticated session user."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="User identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    role: UserRole = Field(..., description="Role fixed at login time")
    phone: str | None = Field(None, description="Contact phone number")


class DirectoryUser(User):
    """User as listed in the admin user directory."""

    joined_date: str = Field(..., description="Account creation timestamp")


class ApiUser(BaseModel):
    """User record as returned by the auth and admin endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    name: str
    email: str
    role: UserRole
    phone: str | None = None
    created_at: str | None = None


class AuthResponse(BaseModel):
    """Body of a successful login or register call."""

    model_config = ConfigDict(extra="ignore")

    token: str
    user: ApiUser
