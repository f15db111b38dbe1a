from __future__ import annotations

from typing import Protocol


class MailerPort(Protocol):
    def send_verification_email(self, *, email: str, name: str | None, token: str) -> None:
        ...

    def send_login_link(self, *, email: str, token: str) -> None:
        ...
