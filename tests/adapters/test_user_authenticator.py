import pytest

from authgate.adapters.outbound.security.user_authenticator import UserAuthenticator
from authgate.domain.exceptions import (
    InvalidCredentialsException,
    UserDisabledException,
    UserNotFoundException,
)


class TestPasslibPasswordHasher:
    def test_hash_and_verify(self, password_hasher):
        """Should verify the original password against its bcrypt hash."""
        hashed = password_hasher.hash("s3cret!")
        assert hashed.startswith("$2")
        assert hashed != "s3cret!"
        assert password_hasher.verify("s3cret!", hashed)
        assert not password_hasher.verify("wrong", hashed)

    def test_unknown_hash_format_does_not_verify(self, password_hasher):
        assert not password_hasher.verify("secret", "plain-text-not-a-hash")


class TestUserAuthenticator:
    @pytest.fixture
    def authenticator(self, user_repository, password_hasher):
        return UserAuthenticator(user_repository, password_hasher)

    @pytest.mark.asyncio
    async def test_valid_credentials(self, authenticator):
        user = await authenticator.authenticate("alice", "secret")
        assert user.username == "alice"

    @pytest.mark.asyncio
    async def test_wrong_password(self, authenticator):
        with pytest.raises(InvalidCredentialsException) as exc_info:
            await authenticator.authenticate("alice", "nope")
        assert exc_info.value.internal_code == "invalid_grant"

    @pytest.mark.asyncio
    async def test_unknown_user_same_message(self, authenticator):
        """Should not reveal whether the username exists."""
        with pytest.raises(UserNotFoundException) as unknown:
            await authenticator.authenticate("nobody", "secret")
        with pytest.raises(InvalidCredentialsException) as wrong:
            await authenticator.authenticate("alice", "nope")
        assert unknown.value.description == wrong.value.description
        assert unknown.value.status_code == 401

    @pytest.mark.asyncio
    async def test_disabled_user(self, authenticator):
        with pytest.raises(UserDisabledException):
            await authenticator.authenticate("bob", "secret")

    @pytest.mark.asyncio
    async def test_disabled_user_with_wrong_password(self, authenticator):
        """Should report bad credentials before revealing the disabled state."""
        with pytest.raises(InvalidCredentialsException):
            await authenticator.authenticate("bob", "nope")
