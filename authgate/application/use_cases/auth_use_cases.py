# authgate/application/use_cases/auth_use_cases.py (async version)

"""
Service for user authentication.

This module implements login, refresh-token rotation, logout and the
current-user lookup on top of the token service and the user store.
"""

import logging
from typing import Any, Dict

from authgate.application.dtos.auth_dto import TokenResponse, UserDTO
from authgate.application.ports.outbound import IAuthenticator, IUserRepository
from authgate.domain.exceptions import (
    InvalidGrantException,
    UserDisabledException,
    UserNotFoundException,
)
from authgate.domain.models.principal import Principal
from authgate.domain.models.user_domain_model import User
from authgate.domain.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AsyncAuthService:
    """
    Service for user authentication.

    Authorities placed in tokens are always read from the user store at
    issuance time, both at login and on refresh.
    """

    def __init__(
            self,
            token_service: TokenService,
            user_repository: IUserRepository,
            authenticator: IAuthenticator,
    ):
        self.token_service = token_service
        self.user_repository = user_repository
        self.authenticator = authenticator

    async def login(self, username: str, password: str) -> TokenResponse:
        """
        Authenticate a user and generate access and refresh tokens.

        Raises:
            InvalidCredentialsException, UserNotFoundException, UserDisabledException
        """
        user = await self.authenticator.authenticate(username, password)
        response = await self._issue_token_pair(user)
        logger.info(f"User '{user.username}' logged in")
        return response

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """
        Exchange a refresh token for a new pair and revoke the old one.

        Raises:
            InvalidGrantException: not a refresh token, invalid, expired,
                revoked, or its user no longer exists
            UserDisabledException: the user has been disabled since login
        """
        if not self.token_service.is_refresh_token(refresh_token):
            raise InvalidGrantException("Token is not a refresh token")

        if not await self.token_service.validate_token(refresh_token):
            raise InvalidGrantException("Refresh token is invalid or expired")

        username = self.token_service.get_username_from_token(refresh_token)
        user = await self.user_repository.find_by_username(username)
        if user is None:
            logger.warning(f"Refresh attempted for missing user '{username}'")
            raise InvalidGrantException("User no longer exists")
        if not user.is_enabled:
            raise UserDisabledException()

        response = await self._issue_token_pair(user)

        # Rotation on use: the old refresh token is dead from here on
        await self.token_service.revoke_token(refresh_token)
        logger.info(f"Refresh token rotated for user '{user.username}'")
        return response

    async def logout(self, access_token: str) -> None:
        """
        Revoke the given token.

        Raises:
            InvalidTokenException: the token cannot be parsed
        """
        claims = await self.token_service.revoke_token(access_token)
        logger.info(f"User '{claims.sub}' logged out")

    async def get_current_user(self, principal: Principal) -> UserDTO:
        user = await self.user_repository.find_by_username(principal.username)
        if user is None:
            raise UserNotFoundException("User no longer exists")
        return UserDTO.from_domain(user, list(principal.authorities))

    async def _issue_token_pair(self, user: User) -> TokenResponse:
        authorities = await self.user_repository.get_authorities(user.id)
        additional_claims: Dict[str, Any] = {}
        if user.tenant_id is not None:
            additional_claims["tenant_id"] = user.tenant_id

        access_token = self.token_service.generate_access_token(
            user.username, user.id, authorities, additional_claims
        )
        refresh_token = self.token_service.generate_refresh_token(
            user.username, user.id, additional_claims
        )
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="Bearer",
            expires_in=int(self.token_service.access_ttl.total_seconds()),
            user=UserDTO.from_domain(user, authorities),
        )
