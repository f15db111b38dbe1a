from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from urllib.parse import urlencode

from campuskit.application.ports.mailer_port import MailerPort
from campuskit.domain.exceptions import MailDeliveryError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpMailerSettings:
    host: str
    port: int
    username: str
    password: str
    use_tls: bool
    sender: str
    app_base_url: str
    timeout_seconds: float = 10.0


def build_verification_link(*, app_base_url: str, token: str) -> str:
    query = urlencode({"token": token})
    return f"{app_base_url.rstrip('/')}/v1/auth/verify-email?{query}"


def build_verification_message(*, sender: str, email: str, name: str | None, link: str) -> EmailMessage:
    greeting = f"Hi {name}," if name else "Hi,"
    message = EmailMessage()
    message["Subject"] = "Verify your email address"
    message["From"] = sender
    message["To"] = email
    message.set_content(
        f"{greeting}\n\n"
        "Confirm your email address to finish setting up your account:\n\n"
        f"{link}\n\n"
        "The link expires in 24 hours. If you did not sign up, you can ignore this email.\n"
    )
    return message


def build_login_link(*, app_base_url: str, token: str) -> str:
    query = urlencode({"token": token})
    return f"{app_base_url.rstrip('/')}/v1/auth/login-link/callback?{query}"


def build_login_message(*, sender: str, email: str, link: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = "Your sign-in link"
    message["From"] = sender
    message["To"] = email
    message.set_content(
        "Use this link to sign in:\n\n"
        f"{link}\n\n"
        "The link works once and expires in 10 minutes. If you did not ask for it, you can ignore this email.\n"
    )
    return message


class SmtpMailer(MailerPort):
    def __init__(self, settings: SmtpMailerSettings):
        self._settings = settings

    def send_verification_email(self, *, email: str, name: str | None, token: str) -> None:
        link = build_verification_link(app_base_url=self._settings.app_base_url, token=token)
        message = build_verification_message(
            sender=self._settings.sender,
            email=email,
            name=name,
            link=link,
        )
        self._send(message, error_detail="Could not send verification email.")
        logger.info("Verification email sent host=%s", self._settings.host)

    def send_login_link(self, *, email: str, token: str) -> None:
        link = build_login_link(app_base_url=self._settings.app_base_url, token=token)
        message = build_login_message(sender=self._settings.sender, email=email, link=link)
        self._send(message, error_detail="Could not send sign-in link.")
        logger.info("Sign-in link sent host=%s", self._settings.host)

    def _send(self, message: EmailMessage, *, error_detail: str) -> None:
        try:
            with smtplib.SMTP(
                self._settings.host,
                self._settings.port,
                timeout=self._settings.timeout_seconds,
            ) as smtp:
                if self._settings.use_tls:
                    smtp.starttls()
                if self._settings.username:
                    smtp.login(self._settings.username, self._settings.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP delivery failed host=%s error=%s", self._settings.host, exc)
            raise MailDeliveryError(error_detail) from exc


class LoggingMailer(MailerPort):
    """Used when no SMTP host is configured; writes the links to the log instead."""

    def __init__(self, *, app_base_url: str):
        self._app_base_url = app_base_url

    def send_verification_email(self, *, email: str, name: str | None, token: str) -> None:
        link = build_verification_link(app_base_url=self._app_base_url, token=token)
        logger.info("SMTP not configured; verification link for %s: %s", email, link)

    def send_login_link(self, *, email: str, token: str) -> None:
        link = build_login_link(app_base_url=self._app_base_url, token=token)
        logger.info("SMTP not configured; sign-in link for %s: %s", email, link)
