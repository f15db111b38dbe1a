from __future__ import annotations

import re
from datetime import datetime, timezone

from campuskit.application.dto.auth import AccountOutput, SessionOutput
from campuskit.application.ports.token_port import TokenPort
from campuskit.domain.entities.account import Account


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def build_account_output(account: Account) -> AccountOutput:
    return AccountOutput(
        id=account.id,
        email=account.email,
        name=account.name,
        image=account.image,
        email_verified=account.is_email_verified,
        has_password=account.has_password,
    )


def issue_session(*, account: Account, token_port: TokenPort) -> SessionOutput:
    token, expires_at = token_port.create_session_token(account_id=account.id, now=utcnow())
    return SessionOutput(
        account_id=account.id,
        session_token=token,
        session_expires_at=expires_at,
    )
