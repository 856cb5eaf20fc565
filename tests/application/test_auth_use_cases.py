from dataclasses import replace

import pytest

from authgate.adapters.outbound.security.user_authenticator import UserAuthenticator
from authgate.application.use_cases.auth_use_cases import AsyncAuthService
from authgate.domain.exceptions import (
    InvalidCredentialsException,
    InvalidGrantException,
    InvalidTokenException,
    UserDisabledException,
    UserNotFoundException,
)
from authgate.domain.models.principal import Principal
from authgate.domain.models.user_domain_model import Permission


class TestAsyncAuthService:
    @pytest.fixture
    def service(self, token_service, user_repository, password_hasher):
        authenticator = UserAuthenticator(user_repository, password_hasher)
        return AsyncAuthService(token_service, user_repository, authenticator)

    @pytest.mark.asyncio
    async def test_login_issues_pair(self, service, token_service):
        """Should return access and refresh tokens for valid credentials."""
        response = await service.login("alice", "secret")

        assert response.token_type == "Bearer"
        assert response.expires_in == 3600
        assert response.user.username == "alice"
        assert response.user.authorities == ["user:view", "ROLE_USER"]
        assert await token_service.validate_token(response.access_token)
        assert token_service.is_refresh_token(response.refresh_token)
        assert not token_service.is_refresh_token(response.access_token)
        assert token_service.get_authorities_from_token(response.access_token) == ["user:view", "ROLE_USER"]

    @pytest.mark.asyncio
    async def test_login_carries_tenant(self, service, token_service):
        response = await service.login("carol", "secret")
        claims = token_service.parse_token(response.access_token)
        assert claims.tenant_id == 42
        assert "ROLE_ADMIN" in claims.authorities

    @pytest.mark.asyncio
    async def test_login_failures(self, service):
        with pytest.raises(InvalidCredentialsException):
            await service.login("alice", "wrong")
        with pytest.raises(UserNotFoundException):
            await service.login("nobody", "secret")
        with pytest.raises(UserDisabledException):
            await service.login("bob", "secret")

    @pytest.mark.asyncio
    async def test_refresh_rotates(self, service, token_service):
        """Should issue a new pair and blacklist the used refresh token."""
        first = await service.login("alice", "secret")
        second = await service.refresh_token(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert await token_service.validate_token(second.refresh_token)
        assert await token_service.validate_token(second.access_token)
        assert not await token_service.validate_token(first.refresh_token)

        with pytest.raises(InvalidGrantException):
            await service.refresh_token(first.refresh_token)

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, service):
        """Should refuse an access token presented as a refresh token."""
        pair = await service.login("alice", "secret")
        with pytest.raises(InvalidGrantException):
            await service.refresh_token(pair.access_token)

    @pytest.mark.asyncio
    async def test_refresh_rejects_garbage(self, service):
        with pytest.raises(InvalidGrantException):
            await service.refresh_token("garbage")

    @pytest.mark.asyncio
    async def test_refresh_reresolves_authorities(self, service, user_repository, token_service):
        """Should put the user's current authorities in the refreshed access token."""
        pair = await service.login("alice", "secret")

        alice = user_repository.users["alice"]
        promoted_role = replace(
            alice.roles[0],
            permissions=alice.roles[0].permissions + [Permission(id=9, permission_code="user:create")],
        )
        user_repository.users["alice"] = replace(alice, roles=[promoted_role])

        refreshed = await service.refresh_token(pair.refresh_token)
        assert "user:create" in token_service.get_authorities_from_token(refreshed.access_token)

    @pytest.mark.asyncio
    async def test_refresh_disabled_user(self, service, user_repository):
        pair = await service.login("alice", "secret")
        user_repository.users["alice"] = replace(user_repository.users["alice"], status=0)

        with pytest.raises(UserDisabledException):
            await service.refresh_token(pair.refresh_token)

    @pytest.mark.asyncio
    async def test_refresh_deleted_user(self, service, user_repository):
        pair = await service.login("alice", "secret")
        del user_repository.users["alice"]

        with pytest.raises(InvalidGrantException):
            await service.refresh_token(pair.refresh_token)

    @pytest.mark.asyncio
    async def test_logout_revokes(self, service, token_service):
        """Should make the token invalid for the rest of its lifetime."""
        pair = await service.login("alice", "secret")
        await service.logout(pair.access_token)
        assert not await token_service.validate_token(pair.access_token)

    @pytest.mark.asyncio
    async def test_logout_unparsable(self, service):
        with pytest.raises(InvalidTokenException):
            await service.logout("garbage")

    @pytest.mark.asyncio
    async def test_get_current_user(self, service):
        principal = Principal(user_id=1, username="alice", authorities=("ROLE_USER",))
        user = await service.get_current_user(principal)

        assert user.username == "alice"
        assert user.email == "alice@example.com"
        assert user.authorities == ["ROLE_USER"]
        assert "password" not in user.model_dump()

    @pytest.mark.asyncio
    async def test_get_current_user_missing(self, service):
        principal = Principal(user_id=99, username="ghost", authorities=())
        with pytest.raises(UserNotFoundException):
            await service.get_current_user(principal)
