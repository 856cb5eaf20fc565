# authgate/adapters/outbound/security/permissions.py (async version)

from fastapi import Depends

from authgate.adapters.inbound.api.deps import get_current_principal
from authgate.domain.exceptions import AccessDeniedException
from authgate.domain.models.principal import Principal


def require_authority(authority: str):
    """
    Returns a dependency that validates if the authenticated principal holds
    a specific authority (permission code such as ``user:create``).

    Usage:
        @router.post(..., dependencies=[Depends(require_authority("user:create"))])
    """

    async def authority_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_authority(authority):
            raise AccessDeniedException(authority=authority)
        return principal

    return authority_checker


def require_role(role: str):
    """
    Dependency that validates if the principal has a role.
    ``ADMIN`` and ``ROLE_ADMIN`` are equivalent.
    """

    async def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_role(role):
            raise AccessDeniedException(authority=role if role.startswith("ROLE_") else f"ROLE_{role}")
        return principal

    return role_checker
