"""
Social login routes (OAuth 2.0).

- GET /auth/social/{provider}/redirect - Send the browser to the provider
- GET /auth/social/{provider}/callback - Provider returns here; the browser
  is then redirected to the frontend with a token, or with an error flag
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from witlt.api.dependencies import get_social_auth_service
from witlt.api.models import ErrorResponse
from witlt.config.settings import get_settings
from witlt.domain.exceptions import UnsupportedProvider
from witlt.domain.social import SUPPORTED_PROVIDERS, SocialAuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/social")


@router.get(
    "/{provider}/redirect",
    status_code=status.HTTP_302_FOUND,
    responses={400: {"model": ErrorResponse, "description": "Unsupported provider"}},
    summary="Start social login",
)
async def redirect(
    provider: str,
    service: SocialAuthService = Depends(get_social_auth_service),
) -> RedirectResponse:
    url = service.authorization_url(provider)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get(
    "/{provider}/callback",
    status_code=status.HTTP_302_FOUND,
    responses={400: {"model": ErrorResponse, "description": "Unsupported provider"}},
    summary="Complete social login",
)
async def callback(
    provider: str,
    code: str | None = None,
    state: str | None = None,
    service: SocialAuthService = Depends(get_social_auth_service),
) -> RedirectResponse:
    """
    Complete the OAuth round trip and hand the token to the frontend.

    Any failure after the provider check ends on the frontend login page
    with ``error=social_auth_failed``.
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise UnsupportedProvider()

    frontend_url = get_settings().frontend_url.rstrip("/")

    if not code or not state:
        logger.warning("Social callback without code or state (provider=%s)", provider)
        return _failure_redirect(frontend_url)

    try:
        session = service.complete(provider, code, state)
    except UnsupportedProvider:
        raise
    except Exception:
        logger.exception("Social authentication failed (provider=%s)", provider)
        return _failure_redirect(frontend_url)

    query = urlencode({"token": session.access_token, "provider": provider})
    return RedirectResponse(
        f"{frontend_url}/auth/social/callback?{query}",
        status_code=status.HTTP_302_FOUND,
    )


def _failure_redirect(frontend_url: str) -> RedirectResponse:
    return RedirectResponse(
        f"{frontend_url}/login?error=social_auth_failed",
        status_code=status.HTTP_302_FOUND,
    )
