"""
Domain error to HTTP response mapping.

Every AuthError raised by a route is rendered as
``{"success": false, "error": {"code", "message", "details"?}}``.
Per-client throttling rejections use the same envelope as the per-email
limit. Request validation errors keep FastAPI's default 422 body.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded as ThrottleExceeded

from witlt.api.models import ErrorBody, ErrorResponse
from witlt.domain.exceptions import (
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

ERROR_STATUS: dict[str, int] = {
    RateLimitExceeded.code: status.HTTP_429_TOO_MANY_REQUESTS,
    ResendCooldown.code: status.HTTP_429_TOO_MANY_REQUESTS,
    TooManyAttempts.code: status.HTTP_429_TOO_MANY_REQUESTS,
    InvalidVerificationCode.code: status.HTTP_400_BAD_REQUEST,
    UnsupportedProvider.code: status.HTTP_400_BAD_REQUEST,
    SocialAuthFailed.code: status.HTTP_400_BAD_REQUEST,
    AuthenticationFailed.code: status.HTTP_401_UNAUTHORIZED,
    Unauthenticated.code: status.HTTP_401_UNAUTHORIZED,
}


def error_response(exc: AuthError) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorBody(code=exc.code, message=exc.message, details=exc.details)
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.code == Unauthenticated.code else None
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return error_response(exc)


async def throttle_exceeded_handler(request: Request, exc: ThrottleExceeded) -> JSONResponse:
    return error_response(RateLimitExceeded())


def install_error_handlers(app: FastAPI) -> None:
    """Register the AuthError and throttling handlers on an application."""
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(ThrottleExceeded, throttle_exceeded_handler)
