from __future__ import annotations

from datetime import datetime
from typing import Protocol

from campuskit.domain.entities.account import Account, AccountIdentity, IdentityProvider


class AccountsPort(Protocol):
    def get_account_by_id(self, *, account_id: str) -> Account | None:
        ...

    def get_account_by_email(self, *, email: str) -> Account | None:
        ...

    def get_account_by_verification_token(self, *, token: str, now: datetime) -> Account | None:
        ...

    def create_account(
        self,
        *,
        account_id: str,
        email: str,
        name: str | None,
        image: str | None,
        password_hash: str | None,
        email_verified_at: datetime | None,
        verification_token: str | None,
        verification_token_expires_at: datetime | None,
        created_at: datetime,
    ) -> Account:
        ...

    def mark_email_verified(self, *, account_id: str, verified_at: datetime) -> None:
        ...

    def consume_verification_token(self, *, account_id: str, token: str, verified_at: datetime) -> bool:
        ...

    def replace_verification_token(
        self,
        *,
        account_id: str,
        token: str,
        expires_at: datetime,
        now: datetime,
    ) -> None:
        ...

    def update_password_hash(self, *, account_id: str, password_hash: str, now: datetime) -> None:
        ...

    def set_initial_password_hash(self, *, account_id: str, password_hash: str, now: datetime) -> bool:
        ...

    def create_identity(
        self,
        *,
        identity_id: str,
        account_id: str,
        provider: IdentityProvider,
        provider_subject: str,
        created_at: datetime,
    ) -> AccountIdentity:
        ...

    def create_login_link(
        self,
        *,
        link_id: str,
        email: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> None:
        ...

    def consume_login_link(self, *, token_hash: str, now: datetime) -> str | None:
        """Marks a live link used and returns its email; None if unknown, used or expired."""
        ...

    def get_identity_by_provider_subject(
        self,
        *,
        provider: IdentityProvider,
        provider_subject: str,
    ) -> AccountIdentity | None:
        ...
