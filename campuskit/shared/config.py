from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str) -> bool:
    return (_env(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


def _list(name: str, default: str) -> list[str]:
    value = _env(name, default) or ""
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    jwt_secret: str
    session_ttl_days: int
    verification_token_ttl_hours: int
    login_link_ttl_minutes: int
    password_bcrypt_rounds: int
    password_argon2_time_cost: int
    google_client_id: str
    app_base_url: str
    smtp_host: str
    smtp_port: int
    smtp_username: str
    smtp_password: str
    smtp_use_tls: bool
    email_from: str
    log_level: str
    cors_allow_origins: list[str]
    auto_create_schema: bool


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        jwt_secret=_env("JWT_SECRET", ""),
        session_ttl_days=int(_env("SESSION_TTL_DAYS", "30")),
        verification_token_ttl_hours=int(_env("VERIFICATION_TOKEN_TTL_HOURS", "24")),
        login_link_ttl_minutes=int(_env("LOGIN_LINK_TTL_MINUTES", "10")),
        password_bcrypt_rounds=int(_env("PASSWORD_BCRYPT_ROUNDS", "12")),
        password_argon2_time_cost=int(_env("PASSWORD_ARGON2_TIME_COST", "3")),
        google_client_id=_env("GOOGLE_CLIENT_ID", ""),
        app_base_url=_env("APP_BASE_URL", "http://localhost:8000"),
        smtp_host=_env("SMTP_HOST", ""),
        smtp_port=int(_env("SMTP_PORT", "587")),
        smtp_username=_env("SMTP_USERNAME", ""),
        smtp_password=_env("SMTP_PASSWORD", ""),
        smtp_use_tls=_bool("SMTP_USE_TLS", "true"),
        email_from=_env("EMAIL_FROM", "no-reply@localhost"),
        log_level=_env("LOG_LEVEL", "INFO"),
        cors_allow_origins=_list("CORS_ALLOW_ORIGINS", "*"),
        auto_create_schema=_bool("AUTO_CREATE_SCHEMA", "false"),
    )
