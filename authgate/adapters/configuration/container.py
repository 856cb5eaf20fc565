# authgate/adapters/configuration/container.py

"""
Application container.

Builds every collaborator of the authentication core from the settings.
Any of the shared-state stores (user repository, blacklist, rate limiter)
can be passed in, which is how tests run without a database and how a
deployment swaps in networked stores.
"""

import logging
from datetime import timedelta
from typing import Optional

from authgate.adapters.configuration.config import Settings
from authgate.adapters.outbound.persistence.database import (
    build_engine,
    build_session_factory,
    init_models,
)
from authgate.adapters.outbound.persistence.repositories.user_repository import AsyncUserRepository
from authgate.adapters.outbound.persistence.seeds import run_all_seeds
from authgate.adapters.outbound.security.password_hasher import PasslibPasswordHasher
from authgate.adapters.outbound.security.rate_limiter import InMemoryRateLimiter
from authgate.adapters.outbound.security.token_blacklist import InMemoryTokenBlacklist
from authgate.adapters.outbound.security.token_codec import JoseTokenCodec
from authgate.adapters.outbound.security.user_authenticator import UserAuthenticator
from authgate.application.ports.outbound import (
    IPasswordHasher,
    IRateLimiter,
    ITokenBlacklist,
    IUserRepository,
)
from authgate.application.use_cases.auth_use_cases import AsyncAuthService
from authgate.domain.services.token_service import TokenService
from authgate.shared.middleware.jwt_auth_middleware import AuthHooks

logger = logging.getLogger(__name__)


class AuthContainer:

    def __init__(
            self,
            settings: Settings,
            *,
            user_repository: Optional[IUserRepository] = None,
            token_blacklist: Optional[ITokenBlacklist] = None,
            rate_limiter: Optional[IRateLimiter] = None,
            password_hasher: Optional[IPasswordHasher] = None,
            hooks: Optional[AuthHooks] = None,
    ):
        self.settings = settings
        self.engine = None
        self.session_factory = None

        if user_repository is None:
            self.engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
            self.session_factory = build_session_factory(self.engine)
            user_repository = AsyncUserRepository(self.session_factory)
        self.user_repository = user_repository

        if token_blacklist is None:
            token_blacklist = InMemoryTokenBlacklist(
                sweep_interval_seconds=settings.BLACKLIST_SWEEP_INTERVAL_SECONDS
            )
        self.token_blacklist = token_blacklist

        if rate_limiter is None:
            rate_limiter = InMemoryRateLimiter(
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
                max_size=settings.RATE_LIMIT_CACHE_MAX_SIZE,
            )
        self.rate_limiter = rate_limiter

        if password_hasher is None:
            password_hasher = PasslibPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
        self.password_hasher = password_hasher

        self.hooks = hooks if hooks is not None else AuthHooks()

        self.token_codec = JoseTokenCodec(algorithm=settings.JWT_ALGORITHM)
        self.token_service = TokenService(
            self.token_codec,
            self.token_blacklist,
            settings.JWT_SECRET,
            issuer=settings.JWT_ISSUER,
            access_ttl=timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
            refresh_ttl=timedelta(seconds=settings.REFRESH_TOKEN_EXPIRE_SECONDS),
        )
        self.authenticator = UserAuthenticator(self.user_repository, self.password_hasher)
        self.auth_service = AsyncAuthService(self.token_service, self.user_repository, self.authenticator)

    async def startup(self) -> None:
        if self.engine is not None:
            if self.settings.DB_CREATE_TABLES:
                await init_models(self.engine)
            if self.settings.SEED_DEFAULT_DATA:
                if self.settings.ENVIRONMENT == "production" and self.settings.SEED_ADMIN_PASSWORD == "admin123":
                    logger.warning("Seeding the administrator with the default password in production")
                await run_all_seeds(
                    self.session_factory,
                    self.password_hasher,
                    self.settings.SEED_ADMIN_USERNAME,
                    self.settings.SEED_ADMIN_PASSWORD,
                )
        await self.token_blacklist.start()

    async def shutdown(self) -> None:
        await self.token_blacklist.stop()
        if self.engine is not None:
            await self.engine.dispose()
