from __future__ import annotations

import logging

from campuskit.application.dto.auth import SetPasswordInput, SetPasswordOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.password_hasher_port import PasswordHasherPort
from campuskit.domain.exceptions import StoreUnavailableError

from .auth_common import normalize_email, utcnow


logger = logging.getLogger(__name__)


class SetPasswordUseCase:
    """One-time password setup for accounts created through an identity provider.

    Failures are reported in the output rather than raised, so callers can
    relay the message as-is.
    """

    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher

    def execute(self, command: SetPasswordInput) -> SetPasswordOutput:
        if not command.password:
            return SetPasswordOutput(success=False, message="Password is required")

        try:
            account = self._accounts_port.get_account_by_email(email=normalize_email(command.email))
            if account is None:
                return SetPasswordOutput(success=False, message="User not found")
            if account.has_password:
                return SetPasswordOutput(success=False, message="Password already set for this account")

            password_hash = self._password_hasher.hash(command.password)
            stored = self._accounts_port.set_initial_password_hash(
                account_id=account.id,
                password_hash=password_hash,
                now=utcnow(),
            )
        except StoreUnavailableError:
            logger.exception("Error setting password")
            return SetPasswordOutput(success=False, message="Failed to set password")

        if not stored:
            return SetPasswordOutput(success=False, message="Password already set for this account")

        logger.info("account.password_set", extra={"account_id": account.id})
        return SetPasswordOutput(success=True, message="Password set successfully")
