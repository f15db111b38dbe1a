from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from campuskit.api.deps import (
    get_login_google_use_case,
    get_login_local_use_case,
    get_login_with_link_use_case,
    get_request_login_link_use_case,
    get_resend_verification_use_case,
    get_set_password_use_case,
    get_sign_up_use_case,
    get_verify_email_use_case,
)
from campuskit.api.schemas.auth import (
    GoogleLoginRequest,
    LoginLinkRequest,
    LoginLinkResponse,
    LoginRequest,
    ResendVerificationRequest,
    ResendVerificationResponse,
    SessionTokenResponse,
    SetPasswordRequest,
    SetPasswordResponse,
    SignUpRequest,
    SignUpResponse,
)
from campuskit.application.dto.auth import (
    LoginGoogleInput,
    LoginLocalInput,
    LoginWithLinkInput,
    RequestLoginLinkInput,
    ResendVerificationInput,
    SessionOutput,
    SetPasswordInput,
    SignUpInput,
    VerifyEmailInput,
)
from campuskit.application.use_cases.login_google import LoginGoogleUseCase
from campuskit.application.use_cases.login_local import LoginLocalUseCase
from campuskit.application.use_cases.login_with_link import LoginWithLinkUseCase
from campuskit.application.use_cases.request_login_link import RequestLoginLinkUseCase
from campuskit.application.use_cases.resend_verification import ResendVerificationUseCase
from campuskit.application.use_cases.set_password import SetPasswordUseCase
from campuskit.application.use_cases.sign_up import SignUpUseCase
from campuskit.application.use_cases.verify_email import VerifyEmailUseCase
from campuskit.domain.exceptions import (
    AccountNotFoundError,
    AccountNotLinkedError,
    DuplicateAccountError,
    EmailNotVerifiedError,
    GoogleTokenValidationError,
    InvalidAccountInputError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    MailDeliveryError,
    NoPasswordSetError,
    StoreUnavailableError,
)
from campuskit.shared.config import get_settings


router = APIRouter()

UNAVAILABLE_DETAIL = "Service temporarily unavailable."


def _session_response(output: SessionOutput) -> SessionTokenResponse:
    return SessionTokenResponse(
        account_id=output.account_id,
        access_token=output.session_token,
        expires_at=output.session_expires_at,
    )


def _redirect(path: str) -> RedirectResponse:
    base_url = get_settings().app_base_url.rstrip("/")
    return RedirectResponse(url=f"{base_url}{path}")


@router.post("/v1/auth/signup", response_model=SignUpResponse, status_code=201)
def sign_up(
    req: SignUpRequest,
    use_case: SignUpUseCase = Depends(get_sign_up_use_case),
):
    try:
        output = use_case.execute(
            SignUpInput(
                email=req.email,
                name=req.name,
                password=req.password,
            )
        )
    except DuplicateAccountError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InvalidAccountInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

    return SignUpResponse(
        account_id=output.account_id,
        verification_token_expires_at=output.verification_token_expires_at,
    )


@router.get("/v1/auth/verify-email")
def verify_email(
    token: str | None = Query(default=None),
    use_case: VerifyEmailUseCase = Depends(get_verify_email_use_case),
):
    if not token:
        return _redirect("/auth/error?error=InvalidToken")

    try:
        use_case.execute(VerifyEmailInput(token=token))
    except InvalidOrExpiredTokenError:
        return _redirect("/auth/error?error=InvalidOrExpiredToken")
    except StoreUnavailableError:
        return _redirect("/auth/error?error=VerificationFailed")

    return _redirect("/dashboard")


@router.post("/v1/auth/login", response_model=SessionTokenResponse)
def login_local(
    req: LoginRequest,
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(LoginLocalInput(email=req.email, password=req.password))
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except (EmailNotVerifiedError, NoPasswordSetError) as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

    return _session_response(output)


@router.post("/v1/auth/google", response_model=SessionTokenResponse)
def login_google(
    req: GoogleLoginRequest,
    use_case: LoginGoogleUseCase = Depends(get_login_google_use_case),
):
    try:
        output = use_case.execute(LoginGoogleInput(id_token=req.id_token))
    except GoogleTokenValidationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except (AccountNotLinkedError, DuplicateAccountError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

    return _session_response(output)


@router.post("/v1/auth/set-password", response_model=SetPasswordResponse)
def set_password(
    req: SetPasswordRequest,
    use_case: SetPasswordUseCase = Depends(get_set_password_use_case),
):
    output = use_case.execute(SetPasswordInput(email=req.email, password=req.password))
    return SetPasswordResponse(success=output.success, message=output.message)


@router.post(
    "/v1/auth/resend-verification",
    response_model=ResendVerificationResponse,
    status_code=202,
)
def resend_verification(
    req: ResendVerificationRequest,
    use_case: ResendVerificationUseCase = Depends(get_resend_verification_use_case),
):
    try:
        use_case.execute(ResendVerificationInput(email=req.email))
    except InvalidAccountInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except MailDeliveryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

    return ResendVerificationResponse(ok=True)


@router.post("/v1/auth/login-link", response_model=LoginLinkResponse, status_code=202)
def request_login_link(
    req: LoginLinkRequest,
    use_case: RequestLoginLinkUseCase = Depends(get_request_login_link_use_case),
):
    try:
        use_case.execute(RequestLoginLinkInput(email=req.email))
    except InvalidAccountInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except MailDeliveryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

    return LoginLinkResponse(ok=True)


@router.get("/v1/auth/login-link/callback", response_model=SessionTokenResponse)
def login_with_link(
    token: str = Query(default=""),
    use_case: LoginWithLinkUseCase = Depends(get_login_with_link_use_case),
):
    try:
        output = use_case.execute(LoginWithLinkInput(token=token))
    except InvalidOrExpiredTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

    return _session_response(output)
