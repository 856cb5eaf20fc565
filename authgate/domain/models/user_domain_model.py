# authgate/domain/models/user_domain_model.py

from dataclasses import dataclass, field
from typing import List, Optional
from datetime import datetime

from authgate.domain.models.principal import DEFAULT_AUTHORITY, ROLE_PREFIX

STATUS_ENABLED = 1
STATUS_DISABLED = 0


@dataclass
class Permission:
    """Domain model for a permission."""
    id: int
    permission_code: str
    permission_name: str = ""


@dataclass
class Role:
    """Domain model for a role grouping permissions."""
    id: int
    role_code: str
    role_name: str = ""
    permissions: List[Permission] = field(default_factory=list)

    def has_permission(self, permission_code: str) -> bool:
        """Check if the role grants a specific permission."""
        return any(p.permission_code == permission_code for p in self.permissions)


@dataclass
class User:
    """Domain model for a user entity."""
    id: int
    username: str
    password: str  # This would be hashed already
    status: int = STATUS_ENABLED
    real_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    tenant_id: Optional[int] = None
    created_time: Optional[datetime] = None
    updated_time: Optional[datetime] = None
    roles: List[Role] = field(default_factory=list)

    @property
    def is_enabled(self) -> bool:
        return self.status == STATUS_ENABLED

    def has_permission(self, permission_code: str) -> bool:
        """Check if user has a specific permission via any of its roles."""
        return any(role.has_permission(permission_code) for role in self.roles)

    def authorities(self) -> List[str]:
        """
        Permission codes of every role plus ``ROLE_<code>`` per role,
        without duplicates, in a stable order. Users with nothing granted
        get the default ``ROLE_USER``.
        """
        granted: List[str] = []
        for role in self.roles:
            for permission in role.permissions:
                if permission.permission_code not in granted:
                    granted.append(permission.permission_code)
        for role in self.roles:
            role_authority = f"{ROLE_PREFIX}{role.role_code.upper()}"
            if role_authority not in granted:
                granted.append(role_authority)
        return granted or [DEFAULT_AUTHORITY]
