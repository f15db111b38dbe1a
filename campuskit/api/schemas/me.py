from __future__ import annotations

from pydantic import BaseModel


class MeResponse(BaseModel):
    id: str
    email: str
    name: str | None
    image: str | None
    email_verified: bool
    has_password: bool
