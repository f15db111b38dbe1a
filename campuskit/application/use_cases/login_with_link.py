from __future__ import annotations

import logging
from uuid import uuid4

from campuskit.application.dto.auth import LoginWithLinkInput, SessionOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import DuplicateAccountError, InvalidOrExpiredTokenError

from .auth_common import issue_session, utcnow


logger = logging.getLogger(__name__)


class LoginWithLinkUseCase:
    def __init__(self, *, accounts_port: AccountsPort, token_port: TokenPort):
        self._accounts_port = accounts_port
        self._token_port = token_port

    def execute(self, command: LoginWithLinkInput) -> SessionOutput:
        token = command.token.strip()
        if not token:
            raise InvalidOrExpiredTokenError("Invalid or expired token.")

        now = utcnow()
        email = self._accounts_port.consume_login_link(
            token_hash=self._token_port.hash_login_token(token=token),
            now=now,
        )
        if email is None:
            raise InvalidOrExpiredTokenError("Invalid or expired token.")

        account = self._accounts_port.get_account_by_email(email=email)
        if account is None:
            try:
                account = self._accounts_port.create_account(
                    account_id=str(uuid4()),
                    email=email,
                    name=None,
                    image=None,
                    password_hash=None,
                    email_verified_at=now,
                    verification_token=None,
                    verification_token_expires_at=None,
                    created_at=now,
                )
            except DuplicateAccountError:
                account = self._accounts_port.get_account_by_email(email=email)
                if account is None:
                    raise
            else:
                logger.info("account.created_from_login_link", extra={"account_id": account.id})

        # Using the link proves control of the mailbox.
        if not account.is_email_verified:
            self._accounts_port.mark_email_verified(account_id=account.id, verified_at=now)

        logger.info("account.login_link_used", extra={"account_id": account.id})
        return issue_session(account=account, token_port=self._token_port)
