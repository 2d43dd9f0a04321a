"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Adapters are created once during app lifespan and kept in app.state.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from witlt.config.settings import get_settings
from witlt.domain.authentication import AuthenticationService
from witlt.domain.exceptions import Unauthenticated
from witlt.domain.models import User
from witlt.domain.ports import EmailSender, RegistrationStore, SessionIssuer, UserRepository
from witlt.domain.registration import RegistrationService
from witlt.domain.social import SocialAuthService


def get_store(request: Request) -> RegistrationStore:
    """Get the expiring key-value store from app state."""
    return request.app.state.store


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the store, repository, email sender and token issuer.
    """
    settings = get_settings()
    return RegistrationService(
        store=get_store(request),
        users=get_user_repository(request),
        email_sender=get_email_sender(request),
        session_issuer=get_session_issuer(request),
        ttl_seconds=settings.verification_ttl_seconds,
        max_attempts=settings.max_attempts,
        resend_cooldown_seconds=settings.resend_cooldown_seconds,
        rate_limit_window_seconds=settings.rate_limit_window_seconds,
        bcrypt_cost=settings.bcrypt_cost,
    )


def get_authentication_service(request: Request) -> AuthenticationService:
    return AuthenticationService(
        users=get_user_repository(request),
        store=get_store(request),
        session_issuer=get_session_issuer(request),
    )


def get_social_auth_service(request: Request) -> SocialAuthService:
    return SocialAuthService(
        users=get_user_repository(request),
        store=get_store(request),
        session_issuer=get_session_issuer(request),
        providers=request.app.state.social_providers,
    )


# Bearer security scheme for OpenAPI documentation.
# auto_error is off so a missing header produces the standard 401 envelope.
http_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str:
    """Extract the raw access token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    service: AuthenticationService = Depends(get_authentication_service),
) -> User:
    return service.authenticate(token)
