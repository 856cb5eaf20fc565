# authgate/adapters/outbound/security/user_authenticator.py

import asyncio
import logging

from authgate.application.ports.outbound import IAuthenticator, IPasswordHasher, IUserRepository
from authgate.domain.exceptions import (
    InvalidCredentialsException,
    UserDisabledException,
    UserNotFoundException,
)
from authgate.domain.models.user_domain_model import User

logger = logging.getLogger(__name__)


class UserAuthenticator(IAuthenticator):
    """
    Username/password authentication against the user store.

    Unknown users and wrong passwords produce the same client-facing message.
    The enabled flag is only revealed to callers who know the password.
    """

    def __init__(self, user_repository: IUserRepository, password_hasher: IPasswordHasher):
        self.user_repository = user_repository
        self.password_hasher = password_hasher

    async def authenticate(self, username: str, password: str) -> User:
        user = await self.user_repository.find_by_username(username)
        if user is None:
            logger.warning(f"Login attempt for unknown user '{username}'")
            raise UserNotFoundException()

        matches = await asyncio.to_thread(self.password_hasher.verify, password, user.password)
        if not matches:
            logger.warning(f"Invalid password for user '{username}'")
            raise InvalidCredentialsException()

        if not user.is_enabled:
            logger.warning(f"Login attempt for disabled user '{username}'")
            raise UserDisabledException()

        return user
