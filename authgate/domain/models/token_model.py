# authgate/domain/models/token_model.py

"""
Typed token claims.

The payload of every issued token is validated into ``TokenClaims`` both
when it is issued and when it is parsed back, so callers never probe the
raw claim dictionary for types.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

ADDITIONAL_CLAIMS = ("tenant_id", "device_id", "client_type")


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


def _widen_int64(value: Any) -> int:
    # JSON numbers arrive as Python int whatever width the issuer used;
    # bool is an int subclass and must not pass as an id.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("must be an integer")
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError("must fit in a signed 64-bit integer")
    return int(value)


class TokenClaims(BaseModel):
    """Claims carried by access and refresh tokens."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str = Field(..., min_length=1, description="Username")
    user_id: int = Field(..., description="Numeric user id")
    token_type: TokenKind = Field(..., description="access or refresh")
    jti: str = Field(..., min_length=1, description="Unique token id, the blacklist key")
    iat: int = Field(..., description="Issued at, epoch seconds")
    exp: int = Field(..., description="Expires at, epoch seconds")
    iss: Optional[str] = None
    authorities: Optional[List[str]] = None
    tenant_id: Optional[int] = None
    device_id: Optional[str] = None
    client_type: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def widen_user_id(cls, value: Any) -> int:
        return _widen_int64(value)

    @field_validator("tenant_id", mode="before")
    @classmethod
    def widen_tenant_id(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        return _widen_int64(value)

    @property
    def is_refresh(self) -> bool:
        return self.token_type == TokenKind.REFRESH

    @property
    def expires_at_millis(self) -> int:
        return self.exp * 1000

    def additional_claims(self) -> Dict[str, Any]:
        """Custom claims present on the token (tenant, device, client type)."""
        return {
            name: getattr(self, name)
            for name in ADDITIONAL_CLAIMS
            if getattr(self, name) is not None
        }

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
