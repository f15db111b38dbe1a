from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from campuskit.application.dto.auth import AccountOutput
from campuskit.application.use_cases.calculate_gwa import CalculateGwaUseCase
from campuskit.application.use_cases.get_current_account import GetCurrentAccountUseCase
from campuskit.application.use_cases.login_google import LoginGoogleUseCase
from campuskit.application.use_cases.login_local import LoginLocalUseCase
from campuskit.application.use_cases.login_with_link import LoginWithLinkUseCase
from campuskit.application.use_cases.request_login_link import RequestLoginLinkUseCase
from campuskit.application.use_cases.resend_verification import ResendVerificationUseCase
from campuskit.application.use_cases.set_password import SetPasswordUseCase
from campuskit.application.use_cases.sign_up import SignUpUseCase
from campuskit.application.use_cases.verify_email import VerifyEmailUseCase
from campuskit.domain.exceptions import InvalidSessionTokenError, StoreUnavailableError
from campuskit.infrastructure.clients.google_oidc_client import GoogleOidcClient
from campuskit.infrastructure.clients.mailer import LoggingMailer, SmtpMailer, SmtpMailerSettings
from campuskit.infrastructure.db.engine import get_engine
from campuskit.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from campuskit.infrastructure.security.password_hasher import PasswordHasher
from campuskit.infrastructure.security.token_service import JwtTokenService
from campuskit.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_accounts_repository() -> SqlAccountsRepository:
    return SqlAccountsRepository(_get_db_engine())


@lru_cache(maxsize=1)
def _get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(
        bcrypt_rounds=settings.password_bcrypt_rounds,
        argon2_time_cost=settings.password_argon2_time_cost,
    )


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(
        jwt_secret=settings.jwt_secret,
        session_ttl_days=settings.session_ttl_days,
        verification_ttl_hours=settings.verification_token_ttl_hours,
        login_link_ttl_minutes=settings.login_link_ttl_minutes,
    )


@lru_cache(maxsize=1)
def _get_google_oauth_client() -> GoogleOidcClient:
    settings = get_settings()
    if not settings.google_client_id:
        raise HTTPException(status_code=500, detail="GOOGLE_CLIENT_ID is required.")
    return GoogleOidcClient(client_id=settings.google_client_id)


@lru_cache(maxsize=1)
def _get_mailer() -> SmtpMailer | LoggingMailer:
    settings = get_settings()
    if not settings.smtp_host:
        return LoggingMailer(app_base_url=settings.app_base_url)
    return SmtpMailer(
        SmtpMailerSettings(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            sender=settings.email_from,
            app_base_url=settings.app_base_url,
        )
    )


def get_sign_up_use_case() -> SignUpUseCase:
    return SignUpUseCase(
        accounts_port=_get_accounts_repository(),
        password_hasher=_get_password_hasher(),
        token_port=_get_token_service(),
        mailer=_get_mailer(),
    )


def get_verify_email_use_case() -> VerifyEmailUseCase:
    return VerifyEmailUseCase(accounts_port=_get_accounts_repository())


def get_login_local_use_case() -> LoginLocalUseCase:
    return LoginLocalUseCase(
        accounts_port=_get_accounts_repository(),
        password_hasher=_get_password_hasher(),
        token_port=_get_token_service(),
    )


def get_login_google_use_case() -> LoginGoogleUseCase:
    return LoginGoogleUseCase(
        accounts_port=_get_accounts_repository(),
        google_oauth_port=_get_google_oauth_client(),
        token_port=_get_token_service(),
    )


def get_set_password_use_case() -> SetPasswordUseCase:
    return SetPasswordUseCase(
        accounts_port=_get_accounts_repository(),
        password_hasher=_get_password_hasher(),
    )


def get_resend_verification_use_case() -> ResendVerificationUseCase:
    return ResendVerificationUseCase(
        accounts_port=_get_accounts_repository(),
        token_port=_get_token_service(),
        mailer=_get_mailer(),
    )


def get_request_login_link_use_case() -> RequestLoginLinkUseCase:
    return RequestLoginLinkUseCase(
        accounts_port=_get_accounts_repository(),
        token_port=_get_token_service(),
        mailer=_get_mailer(),
    )


def get_login_with_link_use_case() -> LoginWithLinkUseCase:
    return LoginWithLinkUseCase(
        accounts_port=_get_accounts_repository(),
        token_port=_get_token_service(),
    )


def get_get_current_account_use_case() -> GetCurrentAccountUseCase:
    return GetCurrentAccountUseCase(
        accounts_port=_get_accounts_repository(),
        token_port=_get_token_service(),
    )


def get_calculate_gwa_use_case() -> CalculateGwaUseCase:
    return CalculateGwaUseCase()


def get_current_account(
    authorization: str = Header(...),
    use_case: GetCurrentAccountUseCase = Depends(get_get_current_account_use_case),
) -> AccountOutput:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing access token.")

    try:
        return use_case.execute(session_token=token)
    except InvalidSessionTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail="Service temporarily unavailable.") from exc
