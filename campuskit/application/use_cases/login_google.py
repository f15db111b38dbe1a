from __future__ import annotations

import logging
from uuid import uuid4

from campuskit.application.dto.auth import LoginGoogleInput, SessionOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.google_oauth_port import GoogleOauthPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import (
    AccountNotFoundError,
    AccountNotLinkedError,
    DuplicateAccountError,
)

from .auth_common import issue_session, normalize_email, utcnow


logger = logging.getLogger(__name__)


class LoginGoogleUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        google_oauth_port: GoogleOauthPort,
        token_port: TokenPort,
    ):
        self._accounts_port = accounts_port
        self._google_oauth_port = google_oauth_port
        self._token_port = token_port

    def execute(self, command: LoginGoogleInput) -> SessionOutput:
        google_identity = self._google_oauth_port.verify_id_token(id_token=command.id_token)
        email = normalize_email(google_identity.email)
        now = utcnow()

        identity = self._accounts_port.get_identity_by_provider_subject(
            provider="google",
            provider_subject=google_identity.subject,
        )
        if identity is not None:
            account = self._accounts_port.get_account_by_id(account_id=identity.account_id)
            if account is None:
                raise AccountNotFoundError("Account linked to Google identity was not found.")
        else:
            account = self._accounts_port.get_account_by_email(email=email)
            created = False
            if account is None:
                try:
                    account = self._accounts_port.create_account(
                        account_id=str(uuid4()),
                        email=email,
                        name=google_identity.name.strip() if google_identity.name else None,
                        image=google_identity.picture,
                        password_hash=None,
                        email_verified_at=now if google_identity.email_verified else None,
                        verification_token=None,
                        verification_token_expires_at=None,
                        created_at=now,
                    )
                except DuplicateAccountError:
                    # Lost a race with a concurrent signup for the same email.
                    account = self._accounts_port.get_account_by_email(email=email)
                    if account is None:
                        raise
                else:
                    created = True
                    logger.info("account.created_from_provider", extra={"account_id": account.id})

            if not created and not google_identity.email_verified:
                # Only a provider-verified email may claim an existing account.
                logger.warning("account.link_refused", extra={"account_id": account.id})
                raise AccountNotLinkedError(
                    "This email is already registered. Sign in with your original method."
                )

            self._accounts_port.create_identity(
                identity_id=str(uuid4()),
                account_id=account.id,
                provider="google",
                provider_subject=google_identity.subject,
                created_at=now,
            )

        if google_identity.email_verified and not account.is_email_verified:
            self._accounts_port.mark_email_verified(account_id=account.id, verified_at=now)
            account = self._accounts_port.get_account_by_id(account_id=account.id) or account

        return issue_session(account=account, token_port=self._token_port)
