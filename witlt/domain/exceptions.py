"""
Domain exceptions - Semantic error types for authentication.

Each exception carries a stable machine-readable ``code`` that the API
layer maps onto an HTTP status. Messages are safe to show to clients.
"""

from typing import Any


class AuthError(Exception):
    """Base class for authentication domain errors."""

    code = "AUTH_ERROR"
    message = "Authentication error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details


class RateLimitExceeded(AuthError):
    """Too many verification codes sent to one email within the window."""

    code = "RATE_LIMIT_EXCEEDED"
    message = "Send limit reached. Please try again later."


class ResendCooldown(AuthError):
    """Resend requested before the cooldown elapsed."""

    code = "RESEND_COOLDOWN"
    message = "A new code can be requested shortly."

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            f"A new code can be requested in {retry_after} seconds.",
            details={"retryAfter": retry_after},
        )
        self.retry_after = retry_after


class InvalidVerificationCode(AuthError):
    """
    No pending registration, wrong code, or the existing-account decoy.

    These cases are deliberately indistinguishable to the caller.
    """

    code = "INVALID_VERIFICATION_CODE"
    message = "The verification code is incorrect."


class TooManyAttempts(AuthError):
    """Verification attempts exhausted for the pending registration."""

    code = "TOO_MANY_ATTEMPTS"
    message = "Too many attempts. Please try again later."


class AuthenticationFailed(AuthError):
    """Email/password login mismatch."""

    code = "AUTHENTICATION_ERROR"
    message = "Email address or password is incorrect."


class Unauthenticated(AuthError):
    """Missing, invalid, expired or revoked session token."""

    code = "UNAUTHENTICATED"
    message = "Authentication required."


class UnsupportedProvider(AuthError):
    code = "UNSUPPORTED_PROVIDER"
    message = "This authentication provider is not supported."


class SocialAuthFailed(AuthError):
    code = "SOCIAL_AUTH_FAILED"
    message = "Social authentication failed."
