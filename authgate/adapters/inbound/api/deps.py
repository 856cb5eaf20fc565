# authgate/adapters/inbound/api/deps.py (async version)

"""
Dependencies for injection into API endpoints.

Collaborators live on the application container; the authenticated
principal is attached to the request by the JWT authentication middleware.
"""

import logging
from fastapi import Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from authgate.adapters.configuration.container import AuthContainer
from authgate.application.use_cases.auth_use_cases import AsyncAuthService
from authgate.domain.exceptions import MissingCredentialException
from authgate.domain.models.principal import Principal
from authgate.shared.utils import security_context

# Configure logger
logger = logging.getLogger(__name__)

# Bearer scheme, documents the Authorization header in OpenAPI.
# Missing credentials are reported by our own exception.
bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> AuthContainer:
    return request.app.state.container


def get_auth_service(request: Request) -> AsyncAuthService:
    return get_container(request).auth_service


async def get_bearer_token(
        credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise MissingCredentialException()
    return credentials.credentials


async def get_current_principal(
        request: Request,
        _: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Principal:
    """
    Principal of the current request.

    Raises:
        MissingCredentialException: The route is not behind the authentication stage
    """
    principal = security_context.get_principal(request)
    if principal is None:
        logger.warning(f"No authenticated principal on protected route {request.url.path}")
        raise MissingCredentialException()
    return principal
