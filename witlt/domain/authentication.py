"""
Authentication domain service - login and session lifecycle.

Tokens are stateless; logout works by recording the token id in the
expiring store until the token would have expired anyway.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .codes import hash_secret, verify_secret
from .exceptions import AuthenticationFailed, Unauthenticated
from .models import Session, User
from .ports import RegistrationStore, SessionIssuer, UserRepository
from .registration import normalize_email

logger = logging.getLogger(__name__)

# Compared against when the account is missing or passwordless so that
# bcrypt always runs and response time does not reveal account existence.
_DUMMY_BCRYPT_HASH = hash_secret("dummy_password_for_timing_safety", 10)


def revoked_token_key(jti: str) -> str:
    return f"revoked_token:{jti}"


@dataclass
class AuthenticationService:
    """Domain service for password login and token-based sessions."""

    users: UserRepository
    store: RegistrationStore
    session_issuer: SessionIssuer
    clock: Callable[[], float] = time.time

    def login(self, email: str, password: str) -> Session:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationFailed: Unknown email, social-only account, or wrong password
        """
        user = self.users.get_by_email(normalize_email(email))

        stored_hash = _DUMMY_BCRYPT_HASH
        if user is not None and user.password_hash:
            stored_hash = user.password_hash

        password_valid = verify_secret(password, stored_hash)
        if user is None or not user.password_hash or not password_valid:
            raise AuthenticationFailed()

        return Session(user=user, access_token=self.session_issuer.issue(user))

    def authenticate(self, token: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            Unauthenticated: Invalid, expired or revoked token, or deleted user
        """
        claims = self.session_issuer.decode(token)
        if self.store.get(revoked_token_key(claims.jti)) is not None:
            raise Unauthenticated()

        user = self.users.get_by_id(claims.user_id)
        if user is None:
            raise Unauthenticated()
        return user

    def logout(self, token: str) -> None:
        """Revoke a token for the rest of its lifetime."""
        claims = self.session_issuer.decode(token)
        remaining = claims.expires_at - int(self.clock())
        if remaining > 0:
            self.store.set(revoked_token_key(claims.jti), "1", remaining)
        logger.info("Session revoked for user %s", claims.user_id)

    def refresh(self, token: str) -> str:
        """Exchange a valid token for a new one; the old token is revoked."""
        user = self.authenticate(token)
        self.logout(token)
        return self.session_issuer.issue(user)
