from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from campuskit.application.dto.auth import (
    GoogleIdentityInfo,
    LoginGoogleInput,
    LoginLocalInput,
    SignUpInput,
    VerifyEmailInput,
)
from campuskit.application.use_cases.login_google import LoginGoogleUseCase
from campuskit.application.use_cases.login_local import LoginLocalUseCase
from campuskit.application.use_cases.sign_up import SignUpUseCase
from campuskit.application.use_cases.verify_email import VerifyEmailUseCase
from campuskit.domain.exceptions import (
    AccountNotLinkedError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    NoPasswordSetError,
)

from conftest import FakePasswordHasher


class FakeGoogleOauthPort:
    def __init__(self, *, email_verified: bool = True, subject: str = "google-sub-1"):
        self._email_verified = email_verified
        self._subject = subject

    def verify_id_token(self, *, id_token: str) -> GoogleIdentityInfo:
        assert id_token == "token-google"
        return GoogleIdentityInfo(
            subject=self._subject,
            email="Student@Example.com",
            email_verified=self._email_verified,
            name="Google Student",
            picture="https://example.com/avatar.png",
        )


def _sign_up(accounts_port, password_hasher, token_service, mailer, *, verify: bool) -> str:
    output = SignUpUseCase(
        accounts_port=accounts_port,
        password_hasher=password_hasher,
        token_port=token_service,
        mailer=mailer,
    ).execute(SignUpInput(email="student@example.com", name="Student", password="12345678"))
    if verify:
        token = accounts_port.get_account_by_id(account_id=output.account_id).verification_token
        VerifyEmailUseCase(accounts_port=accounts_port).execute(VerifyEmailInput(token=token))
    return output.account_id


def _login_use_case(accounts_port, password_hasher, token_service) -> LoginLocalUseCase:
    return LoginLocalUseCase(
        accounts_port=accounts_port,
        password_hasher=password_hasher,
        token_port=token_service,
    )


def test_login_before_verification_fails_even_with_correct_password(
    accounts_port, password_hasher, token_service, mailer
):
    _sign_up(accounts_port, password_hasher, token_service, mailer, verify=False)

    with pytest.raises(EmailNotVerifiedError):
        _login_use_case(accounts_port, password_hasher, token_service).execute(
            LoginLocalInput(email="student@example.com", password="12345678")
        )


def test_login_after_verification_returns_session_for_account(accounts_port, password_hasher, token_service, mailer):
    account_id = _sign_up(accounts_port, password_hasher, token_service, mailer, verify=True)

    output = _login_use_case(accounts_port, password_hasher, token_service).execute(
        LoginLocalInput(email="STUDENT@example.com ", password="12345678")
    )

    assert output.account_id == account_id
    payload = token_service.decode_session_token(token=output.session_token)
    assert payload.account_id == account_id
    assert payload.expires_at == output.session_expires_at.replace(microsecond=0)
    assert payload.expires_at - payload.issued_at == timedelta(days=30)


def test_login_unknown_email_reports_invalid_credentials(accounts_port, password_hasher, token_service):
    with pytest.raises(InvalidCredentialsError) as exc_info:
        _login_use_case(accounts_port, password_hasher, token_service).execute(
            LoginLocalInput(email="nobody@example.com", password="12345678")
        )

    assert str(exc_info.value) == "Invalid email or password."
    assert password_hasher.hash_calls == 1


def test_login_wrong_password_reports_invalid_credentials(accounts_port, password_hasher, token_service, mailer):
    _sign_up(accounts_port, password_hasher, token_service, mailer, verify=True)

    with pytest.raises(InvalidCredentialsError):
        _login_use_case(accounts_port, password_hasher, token_service).execute(
            LoginLocalInput(email="student@example.com", password="wrong-password")
        )


def test_login_without_password_hash_fails(accounts_port, password_hasher, token_service):
    now = datetime.now(timezone.utc)
    accounts_port.create_account(
        account_id="acc-google",
        email="student@example.com",
        name=None,
        image=None,
        password_hash=None,
        email_verified_at=now,
        verification_token=None,
        verification_token_expires_at=None,
        created_at=now,
    )

    with pytest.raises(NoPasswordSetError):
        _login_use_case(accounts_port, password_hasher, token_service).execute(
            LoginLocalInput(email="student@example.com", password="anything")
        )


def test_login_upgrades_legacy_hash(accounts_port, token_service):
    now = datetime.now(timezone.utc)
    accounts_port.create_account(
        account_id="acc-legacy",
        email="student@example.com",
        name=None,
        image=None,
        password_hash="legacy::12345678",
        email_verified_at=now,
        verification_token=None,
        verification_token_expires_at=None,
        created_at=now,
    )
    hasher = FakePasswordHasher(upgrade_legacy=True)

    _login_use_case(accounts_port, hasher, token_service).execute(
        LoginLocalInput(email="student@example.com", password="12345678")
    )

    assert accounts_port.get_account_by_id(account_id="acc-legacy").password_hash == "hashed::12345678"


def test_login_google_creates_provider_account_without_password(accounts_port, token_service):
    use_case = LoginGoogleUseCase(
        accounts_port=accounts_port,
        google_oauth_port=FakeGoogleOauthPort(),
        token_port=token_service,
    )

    output = use_case.execute(LoginGoogleInput(id_token="token-google"))

    account = accounts_port.get_account_by_id(account_id=output.account_id)
    assert account.email == "student@example.com"
    assert account.name == "Google Student"
    assert account.image == "https://example.com/avatar.png"
    assert account.password_hash is None
    assert account.email_verified_at is not None
    identity = accounts_port.get_identity_by_provider_subject(provider="google", provider_subject="google-sub-1")
    assert identity.account_id == account.id
    assert token_service.decode_session_token(token=output.session_token).account_id == account.id


def test_login_google_links_existing_account_and_verifies_email(
    accounts_port, password_hasher, token_service, mailer
):
    account_id = _sign_up(accounts_port, password_hasher, token_service, mailer, verify=False)
    use_case = LoginGoogleUseCase(
        accounts_port=accounts_port,
        google_oauth_port=FakeGoogleOauthPort(),
        token_port=token_service,
    )

    output = use_case.execute(LoginGoogleInput(id_token="token-google"))

    assert output.account_id == account_id
    account = accounts_port.get_account_by_id(account_id=account_id)
    assert account.email_verified_at is not None
    assert account.verification_token is None
    assert len(accounts_port.accounts) == 1


def test_login_google_reuses_linked_identity(accounts_port, token_service):
    use_case = LoginGoogleUseCase(
        accounts_port=accounts_port,
        google_oauth_port=FakeGoogleOauthPort(),
        token_port=token_service,
    )

    first = use_case.execute(LoginGoogleInput(id_token="token-google"))
    second = use_case.execute(LoginGoogleInput(id_token="token-google"))

    assert first.account_id == second.account_id
    assert len(accounts_port.identities) == 1


def test_login_google_unverified_email_stays_unverified(accounts_port, token_service):
    use_case = LoginGoogleUseCase(
        accounts_port=accounts_port,
        google_oauth_port=FakeGoogleOauthPort(email_verified=False),
        token_port=token_service,
    )

    output = use_case.execute(LoginGoogleInput(id_token="token-google"))

    assert accounts_port.get_account_by_id(account_id=output.account_id).email_verified_at is None


def test_login_google_with_unverified_email_does_not_claim_existing_account(
    accounts_port, password_hasher, token_service, mailer
):
    account_id = _sign_up(accounts_port, password_hasher, token_service, mailer, verify=True)
    use_case = LoginGoogleUseCase(
        accounts_port=accounts_port,
        google_oauth_port=FakeGoogleOauthPort(email_verified=False, subject="other-google-sub"),
        token_port=token_service,
    )

    with pytest.raises(AccountNotLinkedError):
        use_case.execute(LoginGoogleInput(id_token="token-google"))

    assert accounts_port.identities == {}
    assert accounts_port.get_account_by_id(account_id=account_id).password_hash == "hashed::12345678"


def test_login_google_with_unverified_email_does_not_claim_pending_account(
    accounts_port, password_hasher, token_service, mailer
):
    account_id = _sign_up(accounts_port, password_hasher, token_service, mailer, verify=False)
    use_case = LoginGoogleUseCase(
        accounts_port=accounts_port,
        google_oauth_port=FakeGoogleOauthPort(email_verified=False),
        token_port=token_service,
    )

    with pytest.raises(AccountNotLinkedError):
        use_case.execute(LoginGoogleInput(id_token="token-google"))

    account = accounts_port.get_account_by_id(account_id=account_id)
    assert account.email_verified_at is None
    assert account.verification_token is not None
