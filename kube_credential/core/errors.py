from __future__ import annotations


class CredentialPlatformError(Exception):
    """Base error for all credential platform exceptions."""


class CredentialValidationError(CredentialPlatformError):
    """Raised when a submitted credential fails shape/type validation.

    Carries every problem found, not just the first, so clients can fix
    a payload in one round trip.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class IssuanceUnavailableError(CredentialPlatformError):
    """Raised when the issuance service cannot be reached or answers badly."""


class StoreError(CredentialPlatformError):
    """Raised when the backing store fails to read or write."""
