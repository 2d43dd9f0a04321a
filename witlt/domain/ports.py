"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Any, Protocol

from .models import SocialIdentity, TokenClaims, User


class RegistrationStore(Protocol):
    """
    Port interface for the expiring key-value store.

    A ``get`` issued after a ``set`` in the same request must observe the
    written value. Expired keys behave exactly like absent keys.
    """

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Write ``value`` under ``key``, replacing any prior value and TTL."""
        ...

    def get(self, key: str) -> str | None:
        ...

    def delete(self, key: str) -> None:
        ...

    def ttl(self, key: str) -> int | None:
        """
        Remaining lifetime of ``key`` in seconds.

        Returns:
            Seconds until expiry, or None if the key is absent or has no expiry
        """
        ...

    def increment(self, key: str) -> int:
        """Atomically increment an integer counter, creating it at 1."""
        ...

    def expire(self, key: str, ttl_seconds: int) -> None:
        ...


class UserRepository(Protocol):
    """Port interface for durable user persistence."""

    def exists_by_email(self, email: str) -> bool:
        ...

    def get_by_email(self, email: str) -> User | None:
        ...

    def get_by_id(self, user_id: int) -> User | None:
        ...

    def create_user(
        self,
        email: str,
        password_hash: str,
        nickname: str,
        settings: dict[str, Any],
    ) -> User:
        """
        Create a user and its settings row as one transaction.

        Either both rows are committed or neither is. Errors propagate
        unchanged after rollback.
        """
        ...

    def link_or_create_social_user(
        self,
        provider: str,
        provider_id: str,
        email: str,
        nickname: str,
        settings: dict[str, Any],
    ) -> User:
        """
        Resolve a social identity to a user inside one transaction.

        Matching precedence:
        1. User whose provider id column equals ``provider_id`` is reused
        2. Otherwise a user with ``email`` gets ``provider_id`` linked onto it
        3. Otherwise a new passwordless user plus settings row is created
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Send verification code to email address.

        Args:
            email: Recipient email address
            code: 6-digit verification code
        """
        ...

    def send_existing_account_notice(self, email: str) -> None:
        """Tell an account holder that someone tried to register their address."""
        ...


class SessionIssuer(Protocol):
    """Port interface for access token issuance."""

    ttl_seconds: int

    def issue(self, user: User) -> str:
        ...

    def decode(self, token: str) -> TokenClaims:
        """
        Validate a token and return its claims.

        Raises:
            Unauthenticated: If the token is malformed, forged or expired
        """
        ...


class SocialIdentityProvider(Protocol):
    """Port interface for a third-party OAuth identity provider."""

    def authorization_url(self, state: str, code_verifier: str) -> str:
        ...

    def fetch_identity(self, code: str, code_verifier: str) -> SocialIdentity:
        """Exchange an authorization code and return the provider identity."""
        ...

    def close(self) -> None:
        """Release any connections held by the provider."""
        ...
