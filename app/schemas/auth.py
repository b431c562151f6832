"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel

from app.schemas.user import CamelModel, UserPublic


class SignupRequest(BaseModel):
    # Optional so a missing field reaches the service and fails as MissingField.
    email: str | None = None
    password: str | None = None
    city: str | None = None
    country: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UpdateProfileRequest(BaseModel):
    city: str | None = None
    country: str | None = None


class TokenResponse(CamelModel):
    token: str
    user: UserPublic


class VerifyResponse(CamelModel):
    valid: bool
    user_id: str
