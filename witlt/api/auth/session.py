"""
Session routes: login, current user, logout and token refresh.
"""

from fastapi import APIRouter, Depends

from witlt.api.dependencies import (
    get_authentication_service,
    get_bearer_token,
    get_current_user,
    get_session_issuer,
)
from witlt.api.models import (
    ErrorResponse,
    LoginRequest,
    MessageData,
    ProfileData,
    ProfileEnvelope,
    RefreshData,
    SessionData,
    SuccessResponse,
    UserData,
)
from witlt.domain.authentication import AuthenticationService
from witlt.domain.models import User
from witlt.domain.ports import SessionIssuer

router = APIRouter()

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Missing or invalid token"}}


@router.post(
    "/login",
    response_model=SuccessResponse[SessionData],
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        422: {"description": "Validation error"},
    },
    summary="Log in with email and password",
)
async def login(
    request_data: LoginRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> SuccessResponse[SessionData]:
    session = service.login(request_data.email, request_data.password)
    return SuccessResponse[SessionData](
        data=SessionData(
            user=UserData.from_user(session.user),
            access_token=session.access_token,
        )
    )


@router.get(
    "/me",
    response_model=SuccessResponse[ProfileEnvelope],
    responses=_UNAUTHORIZED,
    summary="Get the current user",
)
async def me(user: User = Depends(get_current_user)) -> SuccessResponse[ProfileEnvelope]:
    return SuccessResponse[ProfileEnvelope](data=ProfileEnvelope(user=ProfileData.from_user(user)))


@router.post(
    "/logout",
    response_model=SuccessResponse[MessageData],
    responses=_UNAUTHORIZED,
    summary="Revoke the current token",
    dependencies=[Depends(get_current_user)],
)
async def logout(
    token: str = Depends(get_bearer_token),
    service: AuthenticationService = Depends(get_authentication_service),
) -> SuccessResponse[MessageData]:
    service.logout(token)
    return SuccessResponse[MessageData](data=MessageData(message="Logged out"))


@router.post(
    "/refresh",
    response_model=SuccessResponse[RefreshData],
    responses=_UNAUTHORIZED,
    summary="Exchange the current token for a new one",
)
async def refresh(
    token: str = Depends(get_bearer_token),
    service: AuthenticationService = Depends(get_authentication_service),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SuccessResponse[RefreshData]:
    new_token = service.refresh(token)
    return SuccessResponse[RefreshData](
        data=RefreshData(
            access_token=new_token,
            refresh_token=new_token,
            expires_in=issuer.ttl_seconds,
        )
    )
