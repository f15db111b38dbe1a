from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from campuskit.application.dto.auth import SessionTokenPayload
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.exceptions import InvalidSessionTokenError


SESSION_TOKEN_TYPE = "session"


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        jwt_secret: str,
        session_ttl_days: int = 30,
        verification_ttl_hours: int = 24,
        login_link_ttl_minutes: int = 10,
    ):
        self._jwt_secret = jwt_secret
        self._session_ttl_days = session_ttl_days
        self._verification_ttl_hours = verification_ttl_hours
        self._login_link_ttl_minutes = login_link_ttl_minutes

    def create_session_token(self, *, account_id: str, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(days=self._session_ttl_days)
        payload = {
            "sub": account_id,
            "type": SESSION_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._jwt_secret, algorithm="HS256")
        return token, exp

    def decode_session_token(self, *, token: str) -> SessionTokenPayload:
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=["HS256"],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidSessionTokenError("Invalid session token.") from exc

        if payload.get("type") != SESSION_TOKEN_TYPE:
            raise InvalidSessionTokenError("Invalid token type.")

        account_id = payload.get("sub")
        if not account_id or not isinstance(account_id, str):
            raise InvalidSessionTokenError("Invalid token subject.")

        return SessionTokenPayload(
            account_id=account_id,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def issue_verification_token(self, *, now: datetime) -> tuple[str, datetime]:
        return secrets.token_urlsafe(32), now + timedelta(hours=self._verification_ttl_hours)

    def issue_login_token(self, *, now: datetime) -> tuple[str, datetime]:
        return secrets.token_urlsafe(32), now + timedelta(minutes=self._login_link_ttl_minutes)

    def hash_login_token(self, *, token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
