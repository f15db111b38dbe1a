from __future__ import annotations

import logging

from campuskit.application.dto.auth import VerifyEmailInput, VerifyEmailOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.domain.exceptions import InvalidOrExpiredTokenError

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, command: VerifyEmailInput) -> VerifyEmailOutput:
        token = command.token.strip()
        if not token:
            raise InvalidOrExpiredTokenError("Invalid or expired token.")

        now = utcnow()
        account = self._accounts_port.get_account_by_verification_token(token=token, now=now)
        if account is None:
            raise InvalidOrExpiredTokenError("Invalid or expired token.")

        consumed = self._accounts_port.consume_verification_token(
            account_id=account.id,
            token=token,
            verified_at=now,
        )
        if not consumed:
            raise InvalidOrExpiredTokenError("Invalid or expired token.")

        logger.info("account.verified", extra={"account_id": account.id})
        return VerifyEmailOutput(account_id=account.id)
