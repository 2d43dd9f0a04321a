"""
Registration routes.

Defines the verification code endpoints:
- POST /auth/register/send-code   - Start registration, mail a code
- POST /auth/register/resend-code - Mail a fresh code
- POST /auth/register/verify      - Complete registration with the code
"""

from fastapi import APIRouter, Depends, Request, status

from witlt.api.dependencies import get_registration_service
from witlt.api.models import (
    CodeSentData,
    ErrorResponse,
    ResendCodeRequest,
    SendCodeRequest,
    SessionData,
    SuccessResponse,
    UserData,
    VerifyCodeRequest,
)
from witlt.api.rate_limit import limiter, send_code_limit
from witlt.domain.registration import RegistrationService

router = APIRouter(prefix="/register")


@router.post(
    "/send-code",
    response_model=SuccessResponse[CodeSentData],
    responses={
        429: {
            "model": ErrorResponse,
            "description": "Too many codes sent to this email or from this client",
        },
        422: {"description": "Validation error"},
    },
    summary="Send a registration code",
    description="Submit email, password and nickname to begin registration. "
    "A 6-digit verification code will be sent to the provided email.",
)
@limiter.limit(send_code_limit)
async def send_code(
    request: Request,
    request_data: SendCodeRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse[CodeSentData]:
    """
    Start a registration and send the verification code.

    The response is identical whether or not the email is already registered.
    """
    dispatch = service.send_code(request_data.email, request_data.password, request_data.nickname)
    return SuccessResponse[CodeSentData](
        data=CodeSentData(
            message="Verification code sent",
            email=dispatch.email,
            expires_in=dispatch.expires_in,
        )
    )


@router.post(
    "/resend-code",
    response_model=SuccessResponse[CodeSentData],
    responses={
        400: {"model": ErrorResponse, "description": "No pending registration"},
        429: {"model": ErrorResponse, "description": "Resend requested during cooldown"},
        422: {"description": "Validation error"},
    },
    summary="Resend the registration code",
)
async def resend_code(
    request_data: ResendCodeRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse[CodeSentData]:
    dispatch = service.resend_code(request_data.email)
    return SuccessResponse[CodeSentData](
        data=CodeSentData(
            message="Verification code resent",
            email=dispatch.email,
            expires_in=dispatch.expires_in,
        )
    )


@router.post(
    "/verify",
    response_model=SuccessResponse[SessionData],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid verification code"},
        429: {"model": ErrorResponse, "description": "Too many attempts"},
        422: {"description": "Validation error"},
    },
    summary="Verify the registration code",
    description="Submit the 6-digit code received via email to create the account "
    "and receive an access token.",
)
async def verify_code(
    request_data: VerifyCodeRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse[SessionData]:
    session = service.verify_code(request_data.email, request_data.code)
    return SuccessResponse[SessionData](
        data=SessionData(
            user=UserData.from_user(session.user),
            access_token=session.access_token,
        )
    )
