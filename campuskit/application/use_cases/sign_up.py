from __future__ import annotations

import logging
from uuid import uuid4

from campuskit.application.dto.auth import SignUpInput, SignUpOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.mailer_port import MailerPort
from campuskit.application.ports.password_hasher_port import PasswordHasherPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import (
    DuplicateAccountError,
    InvalidAccountInputError,
    MailDeliveryError,
)

from .auth_common import is_valid_email, normalize_email, utcnow


logger = logging.getLogger(__name__)


class SignUpUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
        mailer: MailerPort,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._token_port = token_port
        self._mailer = mailer

    def execute(self, command: SignUpInput) -> SignUpOutput:
        email = normalize_email(command.email)
        name = command.name.strip() if command.name else None
        password = command.password

        if not email or not is_valid_email(email):
            raise InvalidAccountInputError("A valid email is required.")
        if not password:
            raise InvalidAccountInputError("password is required.")

        if self._accounts_port.get_account_by_email(email=email) is not None:
            raise DuplicateAccountError("User already exists.")

        password_hash = self._password_hasher.hash(password)
        now = utcnow()
        token, expires_at = self._token_port.issue_verification_token(now=now)

        # A unique violation here is also reported as DuplicateAccountError.
        account = self._accounts_port.create_account(
            account_id=str(uuid4()),
            email=email,
            name=name or None,
            image=None,
            password_hash=password_hash,
            email_verified_at=None,
            verification_token=token,
            verification_token_expires_at=expires_at,
            created_at=now,
        )
        logger.info("account.signup", extra={"account_id": account.id})

        try:
            self._mailer.send_verification_email(email=account.email, name=account.name, token=token)
        except MailDeliveryError:
            logger.warning(
                "Verification email could not be sent; account stays pending.",
                extra={"account_id": account.id},
            )

        return SignUpOutput(account_id=account.id, verification_token_expires_at=expires_at)
