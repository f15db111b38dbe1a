from __future__ import annotations

from campuskit.application.dto.auth import AccountOutput
from campuskit.application.ports.accounts_port import AccountsPort
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import InvalidSessionTokenError

from .auth_common import build_account_output


class GetCurrentAccountUseCase:
    def __init__(self, *, accounts_port: AccountsPort, token_port: TokenPort):
        self._accounts_port = accounts_port
        self._token_port = token_port

    def execute(self, *, session_token: str) -> AccountOutput:
        payload = self._token_port.decode_session_token(token=session_token)
        account = self._accounts_port.get_account_by_id(account_id=payload.account_id)
        if account is None:
            raise InvalidSessionTokenError("Account not found for session.")
        return build_account_output(account)
