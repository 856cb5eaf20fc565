# authgate/adapters/outbound/persistence/models/__init__.py

"""
SQLAlchemy models of the user store.
"""

from authgate.adapters.outbound.persistence.database import Base
from authgate.adapters.outbound.persistence.models.user_model import User, sys_user_role
from authgate.adapters.outbound.persistence.models.role_model import Role, sys_role_permission
from authgate.adapters.outbound.persistence.models.permission_model import Permission

__all__ = [
    "Base",
    "User",
    "Role",
    "Permission",
    "sys_user_role",
    "sys_role_permission",
]
