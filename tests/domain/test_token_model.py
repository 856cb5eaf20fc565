import pytest
from pydantic import ValidationError

from authgate.domain.models.principal import Principal
from authgate.domain.models.token_model import INT64_MAX, TokenClaims, TokenKind
from authgate.domain.models.user_domain_model import Permission, Role, User


def _payload(**overrides):
    payload = {
        "sub": "alice",
        "user_id": 7,
        "token_type": "refresh",
        "jti": "abc",
        "iat": 100,
        "exp": 200,
    }
    payload.update(overrides)
    return payload


class TestTokenClaims:
    def test_minimal_claims(self):
        """Should accept a payload without optional claims."""
        claims = TokenClaims.model_validate(_payload())
        assert claims.token_type == TokenKind.REFRESH
        assert claims.is_refresh
        assert claims.authorities is None
        assert claims.expires_at_millis == 200_000

    def test_unknown_claims_ignored(self):
        """Should ignore claims it does not know."""
        claims = TokenClaims.model_validate(_payload(nbf=1, scope="x"))
        assert "scope" not in claims.to_payload()

    @pytest.mark.parametrize("user_id", [True, "7", 7.5, INT64_MAX + 1])
    def test_user_id_must_be_int64(self, user_id):
        """Should reject booleans, strings, floats and out-of-range ids."""
        with pytest.raises(ValidationError):
            TokenClaims.model_validate(_payload(user_id=user_id))

    def test_unknown_token_type_rejected(self):
        with pytest.raises(ValidationError):
            TokenClaims.model_validate(_payload(token_type="id"))

    def test_to_payload_drops_none(self):
        payload = TokenClaims.model_validate(_payload()).to_payload()
        assert payload["token_type"] == "refresh"
        assert "authorities" not in payload
        assert "tenant_id" not in payload


class TestPrincipal:
    def test_default_authority(self):
        """Should default to ROLE_USER when the token carries no authorities."""
        principal = Principal.from_claims(TokenClaims.model_validate(_payload()))
        assert principal.authorities == ("ROLE_USER",)
        assert principal.username == "alice"
        assert principal.user_id == 7
        assert principal.token_id == "abc"

    def test_has_role_adds_prefix(self):
        principal = Principal(user_id=1, username="a", authorities=("ROLE_ADMIN", "user:view"))
        assert principal.has_role("ADMIN")
        assert principal.has_role("ROLE_ADMIN")
        assert not principal.has_role("USER")
        assert principal.has_authority("user:view")
        assert not principal.has_authority("user:create")


class TestUserAuthorities:
    def test_permissions_then_roles(self):
        """Should list permission codes first, then ROLE_<code>, without duplicates."""
        user = User(
            id=1,
            username="carol",
            password="x",
            roles=[
                Role(id=1, role_code="admin", permissions=[
                    Permission(id=1, permission_code="user:view"),
                    Permission(id=2, permission_code="user:create"),
                ]),
                Role(id=2, role_code="USER", permissions=[Permission(id=1, permission_code="user:view")]),
            ],
        )
        assert user.authorities() == ["user:view", "user:create", "ROLE_ADMIN", "ROLE_USER"]
        assert user.has_permission("user:create")

    def test_no_roles_defaults(self):
        user = User(id=1, username="x", password="x")
        assert user.authorities() == ["ROLE_USER"]
        assert user.is_enabled

    def test_disabled_status(self):
        assert not User(id=1, username="x", password="x", status=0).is_enabled
