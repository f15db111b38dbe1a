from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AccountOutput:
    id: str
    email: str
    name: str | None
    image: str | None
    email_verified: bool
    has_password: bool


@dataclass(frozen=True)
class SignUpInput:
    email: str
    password: str
    name: str | None = None


@dataclass(frozen=True)
class SignUpOutput:
    account_id: str
    verification_token_expires_at: datetime


@dataclass(frozen=True)
class VerifyEmailInput:
    token: str


@dataclass(frozen=True)
class VerifyEmailOutput:
    account_id: str


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str


@dataclass(frozen=True)
class LoginGoogleInput:
    id_token: str


@dataclass(frozen=True)
class SessionOutput:
    account_id: str
    session_token: str
    session_expires_at: datetime


@dataclass(frozen=True)
class SetPasswordInput:
    email: str
    password: str


@dataclass(frozen=True)
class SetPasswordOutput:
    success: bool
    message: str


@dataclass(frozen=True)
class ResendVerificationInput:
    email: str


@dataclass(frozen=True)
class RequestLoginLinkInput:
    email: str


@dataclass(frozen=True)
class LoginWithLinkInput:
    token: str


@dataclass(frozen=True)
class SessionTokenPayload:
    account_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class GoogleIdentityInfo:
    subject: str
    email: str
    email_verified: bool
    name: str | None
    picture: str | None = None
