from __future__ import annotations

import logging

from campuskit.application.dto.auth import LoginLocalInput, SessionOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.password_hasher_port import PasswordHasherPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    NoPasswordSetError,
)

from .auth_common import issue_session, normalize_email, utcnow


logger = logging.getLogger(__name__)


class LoginLocalUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: LoginLocalInput) -> SessionOutput:
        email = normalize_email(command.email)
        account = self._accounts_port.get_account_by_email(email=email) if email else None
        if account is None:
            # Unknown emails pay the same hashing cost as a real check.
            self._password_hasher.hash(command.password)
            raise InvalidCredentialsError("Invalid email or password.")

        if not account.is_email_verified:
            raise EmailNotVerifiedError("Please verify your email before logging in.")

        if not account.has_password:
            raise NoPasswordSetError("No password set for this account.")

        verified, replacement_hash = self._password_hasher.verify_and_update(
            command.password,
            account.password_hash,
        )
        if not verified:
            raise InvalidCredentialsError("Invalid email or password.")

        if replacement_hash:
            self._accounts_port.update_password_hash(
                account_id=account.id,
                password_hash=replacement_hash,
                now=utcnow(),
            )
            logger.info("account.password_rehashed", extra={"account_id": account.id})

        return issue_session(account=account, token_port=self._token_port)
