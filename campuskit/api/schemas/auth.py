from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    name: str | None = Field(default=None, max_length=120)
    password: str = Field(..., min_length=1, max_length=256)


class SignUpResponse(BaseModel):
    account_id: str
    verification_token_expires_at: datetime
    message: str = "Account created. Check your email to verify your address."


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class GoogleLoginRequest(BaseModel):
    id_token: str = Field(..., min_length=1)


class SessionTokenResponse(BaseModel):
    account_id: str
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class SetPasswordRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., max_length=256)


class SetPasswordResponse(BaseModel):
    success: bool
    message: str | None = None


class ResendVerificationRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class ResendVerificationResponse(BaseModel):
    ok: bool


class LoginLinkRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class LoginLinkResponse(BaseModel):
    ok: bool
