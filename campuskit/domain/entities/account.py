from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


IdentityProvider = Literal["google"]


@dataclass(frozen=True)
class Account:
    id: str
    email: str
    name: str | None
    image: str | None
    password_hash: str | None
    email_verified_at: datetime | None
    verification_token: str | None
    verification_token_expires_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_email_verified(self) -> bool:
        return self.email_verified_at is not None

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)


@dataclass(frozen=True)
class AccountIdentity:
    id: str
    account_id: str
    provider: IdentityProvider
    provider_subject: str
    created_at: datetime
