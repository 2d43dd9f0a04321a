"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration workflow, login/session handling
and social login. It defines its own port interfaces for infrastructure
abstraction, so adapters can be swapped without touching the services.
"""

from .authentication import AuthenticationService
from .exceptions import (
    AuthenticationFailed,
    AuthError,
    InvalidVerificationCode,
    RateLimitExceeded,
    ResendCooldown,
    SocialAuthFailed,
    TooManyAttempts,
    Unauthenticated,
    UnsupportedProvider,
)
from .models import CodeDispatch, PendingRegistration, Session, SocialIdentity, TokenClaims, User
from .ports import (
    EmailSender,
    RegistrationStore,
    SessionIssuer,
    SocialIdentityProvider,
    UserRepository,
)
from .registration import RegistrationService
from .social import SocialAuthService

__all__ = [
    "AuthError",
    "AuthenticationFailed",
    "AuthenticationService",
    "CodeDispatch",
    "EmailSender",
    "InvalidVerificationCode",
    "PendingRegistration",
    "RateLimitExceeded",
    "RegistrationService",
    "RegistrationStore",
    "ResendCooldown",
    "Session",
    "SessionIssuer",
    "SocialAuthFailed",
    "SocialAuthService",
    "SocialIdentity",
    "SocialIdentityProvider",
    "TokenClaims",
    "TooManyAttempts",
    "Unauthenticated",
    "UnsupportedProvider",
    "User",
    "UserRepository",
]
