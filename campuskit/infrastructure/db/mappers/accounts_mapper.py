from __future__ import annotations

from typing import Any, Mapping

from campuskit.domain.entities.account import Account, AccountIdentity


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_account(row: Mapping[str, Any]) -> Account:
    return Account(
        id=_as_str(row["id"]),
        email=row["email"],
        name=row.get("name"),
        image=row.get("image"),
        password_hash=row.get("password_hash") or None,
        email_verified_at=row.get("email_verified_at"),
        verification_token=row.get("verification_token"),
        verification_token_expires_at=row.get("verification_token_expires_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_account_identity(row: Mapping[str, Any]) -> AccountIdentity:
    return AccountIdentity(
        id=_as_str(row["id"]),
        account_id=_as_str(row["account_id"]),
        provider=row["provider"],
        provider_subject=row["provider_subject"],
        created_at=row["created_at"],
    )
