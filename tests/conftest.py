from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from campuskit.domain.entities.account import Account, AccountIdentity
from campuskit.domain.exceptions import DuplicateAccountError, MailDeliveryError
from campuskit.infrastructure.security.token_service import JwtTokenService


JWT_SECRET = "test-secret-with-enough-length-for-hs256"


class FakeAccountsPort:
    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self.identities: dict[str, AccountIdentity] = {}
        self.login_links: dict[str, dict] = {}
        self.create_calls = 0

    def get_account_by_id(self, *, account_id: str) -> Account | None:
        return self.accounts.get(account_id)

    def get_account_by_email(self, *, email: str) -> Account | None:
        email_l = email.lower()
        for account in self.accounts.values():
            if account.email.lower() == email_l:
                return account
        return None

    def get_account_by_verification_token(self, *, token: str, now: datetime) -> Account | None:
        for account in self.accounts.values():
            if (
                account.verification_token == token
                and account.verification_token_expires_at is not None
                and account.verification_token_expires_at > now
            ):
                return account
        return None

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
        self.create_calls += 1
        # Mirrors the unique constraint on accounts.email.
        if any(existing.email.lower() == email.lower() for existing in self.accounts.values()):
            raise DuplicateAccountError("User already exists.")
        account = Account(
            id=account_id,
            email=email,
            name=name,
            image=image,
            password_hash=password_hash,
            email_verified_at=email_verified_at,
            verification_token=verification_token,
            verification_token_expires_at=verification_token_expires_at,
            created_at=created_at,
            updated_at=created_at,
        )
        self.accounts[account.id] = account
        return account

    def mark_email_verified(self, *, account_id: str, verified_at: datetime) -> None:
        account = self.accounts[account_id]
        self.accounts[account_id] = replace(
            account,
            email_verified_at=verified_at,
            verification_token=None,
            verification_token_expires_at=None,
            updated_at=verified_at,
        )

    def consume_verification_token(self, *, account_id: str, token: str, verified_at: datetime) -> bool:
        account = self.accounts.get(account_id)
        if account is None or account.verification_token != token:
            return False
        if account.verification_token_expires_at is None or account.verification_token_expires_at <= verified_at:
            return False
        self.mark_email_verified(account_id=account_id, verified_at=verified_at)
        return True

    def replace_verification_token(
        self,
        *,
        account_id: str,
        token: str,
        expires_at: datetime,
        now: datetime,
    ) -> None:
        account = self.accounts[account_id]
        if account.email_verified_at is not None:
            return
        self.accounts[account_id] = replace(
            account,
            verification_token=token,
            verification_token_expires_at=expires_at,
            updated_at=now,
        )

    def update_password_hash(self, *, account_id: str, password_hash: str, now: datetime) -> None:
        account = self.accounts[account_id]
        self.accounts[account_id] = replace(account, password_hash=password_hash, updated_at=now)

    def set_initial_password_hash(self, *, account_id: str, password_hash: str, now: datetime) -> bool:
        account = self.accounts[account_id]
        if account.password_hash:
            return False
        self.accounts[account_id] = replace(account, password_hash=password_hash, updated_at=now)
        return True

    def create_identity(
        self,
        *,
        identity_id: str,
        account_id: str,
        provider: str,
        provider_subject: str,
        created_at: datetime,
    ) -> AccountIdentity:
        identity = AccountIdentity(
            id=identity_id,
            account_id=account_id,
            provider=provider,
            provider_subject=provider_subject,
            created_at=created_at,
        )
        self.identities[identity.id] = identity
        return identity

    def get_identity_by_provider_subject(self, *, provider: str, provider_subject: str) -> AccountIdentity | None:
        for identity in self.identities.values():
            if identity.provider == provider and identity.provider_subject == provider_subject:
                return identity
        return None

    def create_login_link(
        self,
        *,
        link_id: str,
        email: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> None:
        self.login_links[token_hash] = {"email": email, "expires_at": expires_at, "consumed_at": None}

    def consume_login_link(self, *, token_hash: str, now: datetime) -> str | None:
        link = self.login_links.get(token_hash)
        if link is None or link["consumed_at"] is not None or link["expires_at"] <= now:
            return None
        link["consumed_at"] = now
        return link["email"]


class FakePasswordHasher:
    def __init__(self, *, upgrade_legacy: bool = False):
        self._upgrade_legacy = upgrade_legacy
        self.hash_calls = 0

    def hash(self, plain_password: str) -> str:
        self.hash_calls += 1
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return password_hash in (f"hashed::{plain_password}", f"legacy::{plain_password}")

    def verify_and_update(self, plain_password: str, password_hash: str) -> tuple[bool, str | None]:
        if not self.verify(plain_password, password_hash):
            return False, None
        if self._upgrade_legacy and password_hash.startswith("legacy::"):
            return True, self.hash(plain_password)
        return True, None


class FakeMailer:
    def __init__(self, *, fail: bool = False):
        self.sent: list[tuple[str, str | None, str]] = []
        self.login_links: list[tuple[str, str]] = []
        self._fail = fail

    def send_verification_email(self, *, email: str, name: str | None, token: str) -> None:
        if self._fail:
            raise MailDeliveryError("Could not send verification email.")
        self.sent.append((email, name, token))

    def send_login_link(self, *, email: str, token: str) -> None:
        if self._fail:
            raise MailDeliveryError("Could not send sign-in link.")
        self.login_links.append((email, token))


@pytest.fixture
def accounts_port() -> FakeAccountsPort:
    return FakeAccountsPort()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_service() -> JwtTokenService:
    return JwtTokenService(jwt_secret=JWT_SECRET)


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()
