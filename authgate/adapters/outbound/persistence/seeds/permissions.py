# authgate/adapters/outbound/persistence/seeds/permissions.py

"""
Seed script for permissions, roles and the administrator account.

Idempotent: existing rows are kept as they are.
"""

import asyncio
import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from authgate.adapters.outbound.persistence.database import session_scope
from authgate.adapters.outbound.persistence.models import Permission, Role, User
from authgate.adapters.outbound.persistence.models.permission_model import PERMISSION_TYPE_API
from authgate.application.ports.outbound import IPasswordHasher

logger = logging.getLogger(__name__)

# Permissions
permissions = {
    "user:create": "Create user",
    "user:update": "Update user",
    "user:delete": "Delete user",
    "user:view": "View users",
    "user:assign_role": "Assign roles to user",
    "role:create": "Create role",
    "role:update": "Update role",
    "role:delete": "Delete role",
    "role:view": "View roles",
    "role:assign_permission": "Assign permissions to role",
    "permission:create": "Create permission",
    "permission:update": "Update permission",
    "permission:delete": "Delete permission",
    "permission:view": "View permissions",
}

# Permission distribution per role
role_permissions = {
    "ADMIN": ("Administrator", list(permissions)),
    "USER": ("User", ["user:view"]),
}


async def _seed_permissions(db: AsyncSession) -> Dict[str, Permission]:
    permission_objs = {}
    for sort_order, (code, name) in enumerate(permissions.items()):
        result = await db.execute(select(Permission).where(Permission.permission_code == code))
        perm = result.scalar_one_or_none()
        if perm is None:
            perm = Permission(
                permission_code=code,
                permission_name=name,
                permission_type=PERMISSION_TYPE_API,
                sort_order=sort_order,
            )
            db.add(perm)
            logger.info(f"Permission '{code}' created.")
        permission_objs[code] = perm
    return permission_objs


async def _seed_roles(db: AsyncSession, permission_objs: Dict[str, Permission]) -> Dict[str, Role]:
    role_objs = {}
    for code, (name, codes) in role_permissions.items():
        result = await db.execute(
            select(Role).options(selectinload(Role.permissions)).where(Role.role_code == code)
        )
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(
                role_code=code,
                role_name=name,
                permissions=[permission_objs[c] for c in codes],
            )
            db.add(role)
            logger.info(f"Role '{code}' created.")
        role_objs[code] = role
    return role_objs


async def run_permissions_seed(
        session_factory: async_sessionmaker,
        password_hasher: IPasswordHasher,
        admin_username: str,
        admin_password: str,
) -> None:
    async with session_scope(session_factory) as db:
        permission_objs = await _seed_permissions(db)
        role_objs = await _seed_roles(db, permission_objs)

        result = await db.execute(select(User).where(User.username == admin_username))
        if result.scalar_one_or_none() is None:
            hashed = await asyncio.to_thread(password_hasher.hash, admin_password)
            db.add(User(
                username=admin_username,
                password=hashed,
                real_name="Administrator",
                status=1,
                roles=[role_objs["ADMIN"]],
            ))
            logger.info(f"Administrator '{admin_username}' created.")
