from __future__ import annotations

import logging
from uuid import uuid4

from campuskit.application.dto.auth import RequestLoginLinkInput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.mailer_port import MailerPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import InvalidAccountInputError

from .auth_common import is_valid_email, normalize_email, utcnow


logger = logging.getLogger(__name__)


class RequestLoginLinkUseCase:
    """Mails a single-use sign-in link.

    The link is sent whether or not an account exists; the account is
    created when the link is used.
    """

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

    def execute(self, command: RequestLoginLinkInput) -> None:
        email = normalize_email(command.email)
        if not is_valid_email(email):
            raise InvalidAccountInputError("A valid email is required.")

        now = utcnow()
        token, expires_at = self._token_port.issue_login_token(now=now)
        self._accounts_port.create_login_link(
            link_id=str(uuid4()),
            email=email,
            token_hash=self._token_port.hash_login_token(token=token),
            expires_at=expires_at,
            created_at=now,
        )
        self._mailer.send_login_link(email=email, token=token)
        logger.info("login_link.requested")
