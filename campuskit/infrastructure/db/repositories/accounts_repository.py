from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.domain.exceptions import DuplicateAccountError, StoreUnavailableError
from campuskit.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_account,
    map_row_to_account_identity,
)


logger = logging.getLogger(__name__)

ACCOUNT_COLUMNS = """
    id, email, name, image, password_hash, email_verified_at,
    verification_token, verification_token_expires_at, created_at, updated_at
"""

IDENTITY_COLUMNS = "id, account_id, provider, provider_subject, created_at"


class SqlAccountsRepository(AccountsPort):
    def __init__(self, engine):
        self._engine = engine

    @contextmanager
    def _connect(self, *, write: bool = False):
        try:
            ctx = self._engine.begin() if write else self._engine.connect()
            with ctx as conn:
                yield conn
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Credential store operation failed")
            raise StoreUnavailableError("Credential store unavailable.") from exc

    def _fetch_account(self, sql: str, params: dict):
        with self._connect() as conn:
            row = conn.execute(text(sql), params).mappings().first()
        if row is None:
            return None
        return map_row_to_account(row)

    def get_account_by_id(self, *, account_id: str):
        sql = f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM accounts
            WHERE id = :account_id
            LIMIT 1
        """
        return self._fetch_account(sql, {"account_id": account_id})

    def get_account_by_email(self, *, email: str):
        sql = f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM accounts
            WHERE lower(email) = :email
            LIMIT 1
        """
        return self._fetch_account(sql, {"email": email.lower()})

    def get_account_by_verification_token(self, *, token: str, now: datetime):
        sql = f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM accounts
            WHERE verification_token = :token
              AND verification_token_expires_at > :now
            LIMIT 1
        """
        return self._fetch_account(sql, {"token": token, "now": now})

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
    ):
        sql = f"""
            INSERT INTO accounts (
                id, email, name, image, password_hash, email_verified_at,
                verification_token, verification_token_expires_at, created_at, updated_at
            ) VALUES (
                :id, :email, :name, :image, :password_hash, :email_verified_at,
                :verification_token, :verification_token_expires_at, :created_at, :updated_at
            )
            RETURNING {ACCOUNT_COLUMNS}
        """
        params = {
            "id": account_id,
            "email": email,
            "name": name,
            "image": image,
            "password_hash": password_hash or "",
            "email_verified_at": email_verified_at,
            "verification_token": verification_token,
            "verification_token_expires_at": verification_token_expires_at,
            "created_at": created_at,
            "updated_at": created_at,
        }
        try:
            with self._connect(write=True) as conn:
                row = conn.execute(text(sql), params).mappings().one()
        except IntegrityError as exc:
            raise DuplicateAccountError("User already exists.") from exc
        return map_row_to_account(row)

    def mark_email_verified(self, *, account_id: str, verified_at: datetime) -> None:
        sql = """
            UPDATE accounts
            SET email_verified_at = :verified_at,
                verification_token = NULL,
                verification_token_expires_at = NULL,
                updated_at = :verified_at
            WHERE id = :account_id
        """
        with self._connect(write=True) as conn:
            conn.execute(text(sql), {"account_id": account_id, "verified_at": verified_at})

    def consume_verification_token(self, *, account_id: str, token: str, verified_at: datetime) -> bool:
        sql = """
            UPDATE accounts
            SET email_verified_at = :verified_at,
                verification_token = NULL,
                verification_token_expires_at = NULL,
                updated_at = :verified_at
            WHERE id = :account_id
              AND verification_token = :token
              AND verification_token_expires_at > :verified_at
        """
        with self._connect(write=True) as conn:
            result = conn.execute(
                text(sql),
                {"account_id": account_id, "token": token, "verified_at": verified_at},
            )
        return result.rowcount > 0

    def replace_verification_token(
        self,
        *,
        account_id: str,
        token: str,
        expires_at: datetime,
        now: datetime,
    ) -> None:
        sql = """
            UPDATE accounts
            SET verification_token = :token,
                verification_token_expires_at = :expires_at,
                updated_at = :now
            WHERE id = :account_id
              AND email_verified_at IS NULL
        """
        with self._connect(write=True) as conn:
            conn.execute(
                text(sql),
                {
                    "account_id": account_id,
                    "token": token,
                    "expires_at": expires_at,
                    "now": now,
                },
            )

    def update_password_hash(self, *, account_id: str, password_hash: str, now: datetime) -> None:
        sql = """
            UPDATE accounts
            SET password_hash = :password_hash,
                updated_at = :now
            WHERE id = :account_id
        """
        with self._connect(write=True) as conn:
            conn.execute(
                text(sql),
                {"account_id": account_id, "password_hash": password_hash, "now": now},
            )

    def set_initial_password_hash(self, *, account_id: str, password_hash: str, now: datetime) -> bool:
        sql = """
            UPDATE accounts
            SET password_hash = :password_hash,
                updated_at = :now
            WHERE id = :account_id
              AND (password_hash IS NULL OR password_hash = '')
        """
        with self._connect(write=True) as conn:
            result = conn.execute(
                text(sql),
                {"account_id": account_id, "password_hash": password_hash, "now": now},
            )
        return result.rowcount > 0

    def create_identity(
        self,
        *,
        identity_id: str,
        account_id: str,
        provider: str,
        provider_subject: str,
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO account_identities (
                id, account_id, provider, provider_subject, created_at
            ) VALUES (
                :id, :account_id, :provider, :provider_subject, :created_at
            )
            RETURNING {IDENTITY_COLUMNS}
        """
        params = {
            "id": identity_id,
            "account_id": account_id,
            "provider": provider,
            "provider_subject": provider_subject,
            "created_at": created_at,
        }
        try:
            with self._connect(write=True) as conn:
                row = conn.execute(text(sql), params).mappings().one()
        except IntegrityError as exc:
            existing = self.get_identity_by_provider_subject(
                provider=provider,
                provider_subject=provider_subject,
            )
            if existing is None:
                logger.exception("Identity insert rejected by the store")
                raise StoreUnavailableError("Could not link identity.") from exc
            return existing
        return map_row_to_account_identity(row)

    def get_identity_by_provider_subject(self, *, provider: str, provider_subject: str):
        sql = f"""
            SELECT {IDENTITY_COLUMNS}
            FROM account_identities
            WHERE provider = :provider
              AND provider_subject = :provider_subject
            LIMIT 1
        """
        with self._connect() as conn:
            row = conn.execute(
                text(sql),
                {
                    "provider": provider,
                    "provider_subject": provider_subject,
                },
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_account_identity(row)

    def create_login_link(
        self,
        *,
        link_id: str,
        email: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> None:
        sql = """
            INSERT INTO login_links (id, email, token_hash, expires_at, consumed_at, created_at)
            VALUES (:id, :email, :token_hash, :expires_at, NULL, :created_at)
        """
        with self._connect(write=True) as conn:
            conn.execute(
                text(sql),
                {
                    "id": link_id,
                    "email": email,
                    "token_hash": token_hash,
                    "expires_at": expires_at,
                    "created_at": created_at,
                },
            )

    def consume_login_link(self, *, token_hash: str, now: datetime) -> str | None:
        sql = """
            UPDATE login_links
            SET consumed_at = :now
            WHERE token_hash = :token_hash
              AND consumed_at IS NULL
              AND expires_at > :now
            RETURNING email
        """
        with self._connect(write=True) as conn:
            row = conn.execute(text(sql), {"token_hash": token_hash, "now": now}).mappings().first()
        if row is None:
            return None
        return row["email"]
