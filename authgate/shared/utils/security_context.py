# authgate/shared/utils/security_context.py

"""
Per-request security context.

The JWT authentication middleware stores the ``Principal`` and the
additional claims on ``request.state``; these helpers read them back.
"""

from typing import List, Optional

from starlette.requests import Request

from authgate.domain.models.principal import Principal

PRINCIPAL_ATTR = "principal"
TENANT_ID_ATTR = "tenant_id"
DEVICE_ID_ATTR = "device_id"
CLIENT_TYPE_ATTR = "client_type"


def get_principal(request: Request) -> Optional[Principal]:
    return getattr(request.state, PRINCIPAL_ATTR, None)


def set_principal(request: Request, principal: Principal) -> None:
    setattr(request.state, PRINCIPAL_ATTR, principal)


def is_authenticated(request: Request) -> bool:
    return get_principal(request) is not None


def get_username(request: Request) -> Optional[str]:
    principal = get_principal(request)
    return principal.username if principal else None


def get_user_id(request: Request) -> Optional[int]:
    principal = get_principal(request)
    return principal.user_id if principal else None


def get_authorities(request: Request) -> List[str]:
    principal = get_principal(request)
    return list(principal.authorities) if principal else []


def has_authority(request: Request, authority: str) -> bool:
    principal = get_principal(request)
    return principal is not None and principal.has_authority(authority)


def has_role(request: Request, role: str) -> bool:
    principal = get_principal(request)
    return principal is not None and principal.has_role(role)


def get_tenant_id(request: Request) -> Optional[int]:
    return getattr(request.state, TENANT_ID_ATTR, None)


def get_device_id(request: Request) -> Optional[str]:
    return getattr(request.state, DEVICE_ID_ATTR, None)


def get_client_type(request: Request) -> Optional[str]:
    return getattr(request.state, CLIENT_TYPE_ATTR, None)
