# authgate/adapters/inbound/api/v1/endpoints/auth_endpoint.py (async version)

import logging
from fastapi import APIRouter, Depends, status

from authgate.adapters.inbound.api.deps import get_auth_service, get_bearer_token, get_current_principal
from authgate.application.dtos.auth_dto import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    TokenResponse,
    UserDTO,
)
from authgate.application.use_cases.auth_use_cases import AsyncAuthService
from authgate.domain.models.principal import Principal

logger = logging.getLogger(__name__)
router = APIRouter()

_unauthorized = {401: {"model": ErrorResponse, "description": "Invalid credentials or token"}}


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login - Generates access and refresh tokens",
    description=(
            "Authenticates a user (username/password) and returns an access token, "
            "a refresh token, and the authenticated user. Disabled users are rejected."
    ),
    responses={
        **_unauthorized,
        400: {"model": ErrorResponse, "description": "Invalid request body"},
    },
)
async def login(
        login_input: LoginRequest,
        service: AsyncAuthService = Depends(get_auth_service),
):
    return await service.login(login_input.username, login_input.password)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh Token - Renews the token pair",
    description=(
            "Exchanges a valid refresh token for a new access and refresh token. "
            "The submitted refresh token is revoked and cannot be used again."
    ),
    responses=_unauthorized,
)
async def refresh_token(
        refresh_data: RefreshTokenRequest,
        service: AsyncAuthService = Depends(get_auth_service),
):
    return await service.refresh_token(refresh_data.refresh_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout - Revoke current access token",
    description="Invalidates the current access token by adding it to the blacklist.",
    responses=_unauthorized,
)
async def logout(
        token: str = Depends(get_bearer_token),
        service: AsyncAuthService = Depends(get_auth_service),
):
    await service.logout(token)
    return MessageResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=UserDTO,
    summary="Current User - Profile of the authenticated user",
    responses=_unauthorized,
)
async def current_user(
        principal: Principal = Depends(get_current_principal),
        service: AsyncAuthService = Depends(get_auth_service),
):
    return await service.get_current_user(principal)
