"""Exceptions raised by the Better Stack client and credential resolution."""
from typing import Optional


class BetterStackAPIError(Exception):
    """Non-success response from the Better Stack API."""

    def __init__(self, status_code: int, message: str, response_data: Optional[dict] = None):
        self.status_code = status_code
        self.message = message
        self.response_data = response_data or {}
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"better stack api returned {self.status_code}: {self.message}"


def is_not_found(err: BaseException) -> bool:
    """True when err is an API error with status 404."""
    return isinstance(err, BetterStackAPIError) and err.status_code == 404


def is_quota_exceeded(err: BaseException) -> bool:
    """True when err is a 403 whose message mentions the account quota."""
    return (
        isinstance(err, BetterStackAPIError)
        and err.status_code == 403
        and "quota" in err.message.lower()
    )


class CredentialsError(Exception):
    """Base exception for API token resolution failures."""


class InvalidSecretReference(CredentialsError):
    """Raised when the secret reference is malformed."""


class SecretNotFound(CredentialsError):
    """Raised when the referenced secret does not exist."""


class SecretKeyMissing(CredentialsError):
    """Raised when the secret lacks the referenced key."""


class SecretValueEmpty(CredentialsError):
    """Raised when the referenced key holds an empty value."""


class MissingRemoteID(ValueError):
    """Raised when a create or update response carries no entity id."""


class SecretValueInvalid(CredentialsError):
    """Raised when the referenced key does not hold UTF-8 text."""
