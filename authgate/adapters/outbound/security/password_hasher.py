# authgate/adapters/outbound/security/password_hasher.py

import logging

from passlib.context import CryptContext

from authgate.application.ports.outbound import IPasswordHasher

logger = logging.getLogger(__name__)


class PasslibPasswordHasher(IPasswordHasher):
    """
    bcrypt password hashing through passlib.

    Both operations are CPU bound; async callers run them in a thread pool.
    """

    def __init__(self, rounds: int = 12):
        self.crypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """Return the hash of a plain text password."""
        return self.crypt_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify if the plain text password matches the stored hash."""
        try:
            return self.crypt_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            # Unknown or corrupt hash format in the user store
            logger.warning(f"Stored password hash could not be verified: {e}")
            return False
