# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

from pydantic import BaseModel, Field

# Loose shape check only; emails are stored and compared exactly as sent
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# -- Requests --------------------------------------------------------------


class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)


# -- Responses -------------------------------------------------------------


class UserPublic(BaseModel):
    """Outward view of a user – never includes the password hash."""

    id: int
    email: str
    name: str
    role: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserPublic


class MeResponse(BaseModel):
    success: bool = True
    user: UserPublic
