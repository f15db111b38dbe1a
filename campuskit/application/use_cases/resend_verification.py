from __future__ import annotations

import logging

from campuskit.application.dto.auth import ResendVerificationInput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.mailer_port import MailerPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import InvalidAccountInputError

from .auth_common import is_valid_email, normalize_email, utcnow


logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        token_port: TokenPort,
        mailer: MailerPort,
    ):
        self._accounts_port = accounts_port
        self._token_port = token_port
        self._mailer = mailer

    def execute(self, command: ResendVerificationInput) -> None:
        email = normalize_email(command.email)
        if not is_valid_email(email):
            raise InvalidAccountInputError("A valid email is required.")

        account = self._accounts_port.get_account_by_email(email=email)
        if account is None or account.is_email_verified:
            # Same outcome as a real resend so account existence is not revealed.
            return

        now = utcnow()
        token, expires_at = self._token_port.issue_verification_token(now=now)
        self._accounts_port.replace_verification_token(
            account_id=account.id,
            token=token,
            expires_at=expires_at,
            now=now,
        )
        self._mailer.send_verification_email(email=account.email, name=account.name, token=token)
        logger.info("account.verification_resent", extra={"account_id": account.id})
