from __future__ import annotations

from fastapi import APIRouter, Depends

from campuskit.api.deps import get_current_account
from campuskit.api.schemas.me import MeResponse
from campuskit.application.dto.auth import AccountOutput


router = APIRouter()


@router.get("/v1/me", response_model=MeResponse)
def get_me(current_account: AccountOutput = Depends(get_current_account)):
    return MeResponse(
        id=current_account.id,
        email=current_account.email,
        name=current_account.name,
        image=current_account.image,
        email_verified=current_account.email_verified,
        has_password=current_account.has_password,
    )
