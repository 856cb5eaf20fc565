# authgate/adapters/outbound/persistence/repositories/user_repository.py (async version)

"""
Repository for user lookups.

This module implements the IUserRepository port over SQLAlchemy,
mapping ORM rows to domain users with their roles and permissions.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload

from authgate.adapters.outbound.persistence.models import Permission, Role, User
from authgate.application.ports.outbound import IUserRepository
from authgate.domain.exceptions import DatabaseOperationException
from authgate.domain.models.principal import DEFAULT_AUTHORITY
from authgate.domain.models.user_domain_model import (
    Permission as DomainPermission,
    Role as DomainRole,
    User as DomainUser,
)

logger = logging.getLogger(__name__)


class AsyncUserRepository(IUserRepository):
    """
    Async implementation of the user store.

    Soft-deleted users, roles and permissions are invisible.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    def _user_query(self):
        return (
            select(User)
            .options(selectinload(User.roles).selectinload(Role.permissions))
            .where(User.deleted.is_(False))
        )

    async def find_by_username(self, username: str) -> Optional[DomainUser]:
        """
        Find a user by username.

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            async with self.session_factory() as db:
                result = await db.execute(self._user_query().where(User.username == username))
                user = result.scalar_one_or_none()
                return self._to_domain(user) if user else None
        except SQLAlchemyError as e:
            logger.error(f"Error fetching user by username '{username}': {e}")
            raise DatabaseOperationException(
                description="Error fetching user",
                original_error=e
            )

    async def find_by_id(self, user_id: int) -> Optional[DomainUser]:
        try:
            async with self.session_factory() as db:
                result = await db.execute(self._user_query().where(User.id == user_id))
                user = result.scalar_one_or_none()
                return self._to_domain(user) if user else None
        except SQLAlchemyError as e:
            logger.error(f"Error fetching user by id {user_id}: {e}")
            raise DatabaseOperationException(
                description="Error fetching user",
                original_error=e
            )

    async def get_authorities(self, user_id: int) -> List[str]:
        user = await self.find_by_id(user_id)
        if user is None:
            return [DEFAULT_AUTHORITY]
        return user.authorities()

    @staticmethod
    def _to_domain(user: User) -> DomainUser:
        roles = [
            DomainRole(
                id=role.id,
                role_code=role.role_code,
                role_name=role.role_name,
                permissions=[
                    DomainPermission(
                        id=permission.id,
                        permission_code=permission.permission_code,
                        permission_name=permission.permission_name,
                    )
                    for permission in sorted(role.permissions, key=_permission_order)
                    if not permission.deleted
                ],
            )
            for role in sorted(user.roles, key=lambda r: r.id)
            if not role.deleted
        ]
        return DomainUser(
            id=user.id,
            username=user.username,
            password=user.password,
            status=user.status,
            real_name=user.real_name,
            email=user.email,
            phone=user.phone,
            avatar=user.avatar,
            tenant_id=user.tenant_id,
            created_time=user.created_time,
            updated_time=user.updated_time,
            roles=roles,
        )


def _permission_order(permission: Permission):
    return permission.sort_order, permission.id
