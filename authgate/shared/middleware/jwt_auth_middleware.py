# authgate/shared/middleware/jwt_auth_middleware.py (async version)

"""
Middleware for JWT authentication.

Per request:

    blacklisted path  -> 403, before any token work
    whitelisted path  -> passed through unauthenticated
    otherwise         -> extract bearer token (401 if missing)
                         -> pre_validate hook
                         -> signature, expiry, revocation and token kind checks
                         -> Principal
                         -> extract_additional_claims hook
                         -> post_validate hook
                         -> request.state.principal, then the route

Customisation goes through ``AuthHooks``, a set of optional callbacks.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from authgate.domain.exceptions import (
    AuthGateException,
    ForbiddenPathException,
    MissingCredentialException,
)
from authgate.domain.models.principal import Principal
from authgate.domain.models.token_model import TokenClaims
from authgate.domain.services.token_service import TokenService
from authgate.shared.utils import security_context
from authgate.shared.utils.path_rules import path_matches
from authgate.shared.utils.token_extractor import extract_bearer_token

# Configure logger
logger = logging.getLogger(__name__)

PreValidateHook = Callable[[Request, str], Awaitable[None]]
ClaimsHook = Callable[[Request, TokenClaims], Awaitable[None]]
PostValidateHook = Callable[[Request, Principal], Awaitable[None]]
ErrorHook = Callable[[Request, AuthGateException], Awaitable[Optional[Response]]]


async def store_additional_claims(request: Request, claims: TokenClaims) -> None:
    """Copy tenant, device and client type claims into the request state."""
    for name, value in claims.additional_claims().items():
        setattr(request.state, name, value)


@dataclass(frozen=True)
class AuthHooks:
    """
    Extension points of the authentication stage.

    pre_validate / post_validate may raise an AuthGateException to reject
    the request. handle_validation_error may return a response to replace
    the default error body; returning None keeps the default.
    """
    pre_validate: Optional[PreValidateHook] = None
    extract_additional_claims: Optional[ClaimsHook] = store_additional_claims
    post_validate: Optional[PostValidateHook] = None
    handle_validation_error: Optional[ErrorHook] = None


class AsyncJWTAuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Middleware that authenticates every request carrying a bearer token.
    """

    def __init__(
            self,
            app,
            *,
            token_service: TokenService,
            whitelist_paths: Iterable[str] = (),
            blacklist_paths: Iterable[str] = (),
            hooks: Optional[AuthHooks] = None,
    ):
        super().__init__(app)
        self.token_service = token_service
        self.whitelist_paths = list(whitelist_paths)
        self.blacklist_paths = list(blacklist_paths)
        self.hooks = hooks or AuthHooks()

    async def dispatch(self, request: Request, call_next: Callable):
        path = request.url.path

        if path_matches(path, self.blacklist_paths):
            logger.warning(f"Blocked request to forbidden path: {path}")
            raise ForbiddenPathException()

        if path_matches(path, self.whitelist_paths):
            return await call_next(request)

        try:
            principal = await self._authenticate(request)
        except AuthGateException as exc:
            if self.hooks.handle_validation_error is not None:
                response = await self.hooks.handle_validation_error(request, exc)
                if response is not None:
                    return response
            logger.warning(f"Authentication failed: {exc.description} | Path: {path}")
            raise

        security_context.set_principal(request, principal)
        return await call_next(request)

    async def _authenticate(self, request: Request) -> Principal:
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            raise MissingCredentialException()

        if self.hooks.pre_validate is not None:
            await self.hooks.pre_validate(request, token)

        claims = await self.token_service.verify_access_token(token)
        principal = Principal.from_claims(claims)

        if self.hooks.extract_additional_claims is not None:
            await self.hooks.extract_additional_claims(request, claims)

        if self.hooks.post_validate is not None:
            await self.hooks.post_validate(request, principal)

        return principal
