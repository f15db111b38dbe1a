from __future__ import annotations

from passlib.context import CryptContext

from campuskit.application.ports.password_hasher_port import PasswordHasherPort


class PasswordHasher(PasswordHasherPort):
    """argon2 for new hashes; bcrypt hashes are still accepted and upgraded on login."""

    def __init__(self, *, bcrypt_rounds: int = 12, argon2_time_cost: int = 3):
        self._ctx = CryptContext(
            schemes=["argon2", "bcrypt"],
            deprecated="auto",
            argon2__time_cost=argon2_time_cost,
            bcrypt__rounds=bcrypt_rounds,
        )

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        try:
            return self._ctx.verify(plain_password, password_hash)
        except (ValueError, TypeError):
            return False

    def verify_and_update(self, plain_password: str, password_hash: str) -> tuple[bool, str | None]:
        if not password_hash:
            return False, None
        try:
            verified, replacement_hash = self._ctx.verify_and_update(plain_password, password_hash)
            return bool(verified), replacement_hash
        except (ValueError, TypeError):
            return False, None
