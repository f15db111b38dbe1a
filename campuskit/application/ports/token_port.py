from __future__ import annotations

from datetime import datetime
from typing import Protocol

from campuskit.application.dto.auth import SessionTokenPayload


class TokenPort(Protocol):
    def create_session_token(self, *, account_id: str, now: datetime) -> tuple[str, datetime]:
        ...

    def decode_session_token(self, *, token: str) -> SessionTokenPayload:
        ...

    def issue_verification_token(self, *, now: datetime) -> tuple[str, datetime]:
        ...

    def issue_login_token(self, *, now: datetime) -> tuple[str, datetime]:
        ...

    def hash_login_token(self, *, token: str) -> str:
        ...
