# authgate/application/ports/outbound.py

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, List, Mapping, Optional

from authgate.domain.models.token_model import TokenClaims
from authgate.domain.models.user_domain_model import User


class ITokenCodec(ABC):
    """Signs and verifies compact token strings."""

    @abstractmethod
    def issue(self, claims: Mapping[str, Any], signing_key: str, ttl: timedelta) -> str:
        """Stamp iat/exp on the claims and sign them."""
        pass

    @abstractmethod
    def parse(self, token: str, signing_key: str) -> TokenClaims:
        """
        Verify the signature, then decode the claims.
        Raises TokenSignatureInvalidException or TokenMalformedException.
        Expiry is not checked here.
        """
        pass


class ITokenBlacklist(ABC):
    """
    Revocation set keyed by token id.

    Implementations may live in process memory or in a shared store; the
    lifecycle hooks are no-ops for stores that expire entries themselves.
    """

    @abstractmethod
    async def add(self, jti: str, expires_at_millis: int) -> None:
        """Revoke a token id until the given epoch millis."""
        pass

    @abstractmethod
    async def contains(self, jti: Optional[str]) -> bool:
        """Whether the token id is revoked. ``None`` is never revoked."""
        pass

    @abstractmethod
    async def remove(self, jti: str) -> None:
        """Drop a token id from the set."""
        pass

    async def start(self) -> None:
        """Start background housekeeping."""
        return None

    async def stop(self) -> None:
        """Stop background housekeeping."""
        return None


class IRateLimiter(ABC):
    """Per-subject request counter over a fixed window."""

    @property
    @abstractmethod
    def window_seconds(self) -> int:
        pass

    @abstractmethod
    async def check_and_increment(self, subject: str) -> int:
        """Atomically count one more request and return the window's count."""
        pass


class IUserRepository(ABC):
    """User store consumed by the authentication core."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        """Get a non-deleted user with its roles, or None."""
        pass

    @abstractmethod
    async def get_authorities(self, user_id: int) -> List[str]:
        """Current authorities of the user (permission codes and roles)."""
        pass


class IPasswordHasher(ABC):
    """One-way password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, plain_password: str, hashed_password: str) -> bool:
        pass


class IAuthenticator(ABC):
    """Credential check."""

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> User:
        """
        Return the authenticated user or raise InvalidCredentialsException,
        UserNotFoundException or UserDisabledException.
        """
        pass
