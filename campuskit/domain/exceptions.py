from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidAccountInputError(DomainError):
    """Email or password failed validation."""


class DuplicateAccountError(DomainError):
    """An account with this email already exists."""


class InvalidOrExpiredTokenError(DomainError):
    """Verification token is unknown, already used or expired."""


class EmailNotVerifiedError(DomainError):
    """Password login attempted before email verification."""


class NoPasswordSetError(DomainError):
    """Account has no password; sign in with a provider or set one first."""


class InvalidCredentialsError(DomainError):
    """Email/password pair did not match."""


class AccountNotFoundError(DomainError):
    """No account matches the given identifier."""


class InvalidSessionTokenError(DomainError):
    """Session token is malformed, tampered or expired."""


class GoogleTokenValidationError(DomainError):
    """Google id_token could not be validated."""


class StoreUnavailableError(DomainError):
    """Credential store could not complete the operation."""


class MailDeliveryError(DomainError):
    """Verification email could not be delivered."""


class GwaInputError(DomainError):
    """Invalid scale or grade format for GWA calculation."""


class AccountNotLinkedError(DomainError):
    """Provider identity cannot be linked to an existing account by an unverified email."""
