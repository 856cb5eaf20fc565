# authgate/domain/models/principal.py

from dataclasses import dataclass
from typing import Optional, Tuple

from authgate.domain.models.token_model import TokenClaims

ROLE_PREFIX = "ROLE_"
DEFAULT_AUTHORITY = "ROLE_USER"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, built from validated claims for one request."""
    user_id: int
    username: str
    authorities: Tuple[str, ...]
    token_id: Optional[str] = None
    tenant_id: Optional[int] = None
    device_id: Optional[str] = None
    client_type: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "Principal":
        authorities = tuple(claims.authorities) if claims.authorities else (DEFAULT_AUTHORITY,)
        return cls(
            user_id=claims.user_id,
            username=claims.sub,
            authorities=authorities,
            token_id=claims.jti,
            tenant_id=claims.tenant_id,
            device_id=claims.device_id,
            client_type=claims.client_type,
        )

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities

    def has_role(self, role: str) -> bool:
        """Role check; the ``ROLE_`` prefix is added when missing."""
        if not role.startswith(ROLE_PREFIX):
            role = f"{ROLE_PREFIX}{role}"
        return role in self.authorities
