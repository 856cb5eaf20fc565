# authgate/application/dtos/auth_dto.py

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from authgate.application.dtos.base_dto import CustomBaseModel
from authgate.domain.models.user_domain_model import User


class LoginRequest(CustomBaseModel):
    username: str = Field(..., min_length=1, max_length=64, description="Account username")
    password: str = Field(..., min_length=1, max_length=128, description="Account password")


class RefreshTokenRequest(CustomBaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token issued at login")


class UserDTO(CustomBaseModel):
    """Public view of a user. Never carries the password hash."""
    id: int = Field(..., description="User id")
    username: str = Field(..., description="Username")
    real_name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address as stored; not re-validated on output")
    phone: Optional[str] = Field(None, description="Phone number")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    status: int = Field(..., description="1 enabled, 0 disabled")
    tenant_id: Optional[int] = Field(None, description="Tenant id")
    authorities: List[str] = Field(default_factory=list, description="Granted authorities")
    created_time: Optional[datetime] = Field(None, description="Creation time")

    @classmethod
    def from_domain(cls, user: User, authorities: List[str]) -> "UserDTO":
        return cls(
            id=user.id,
            username=user.username,
            real_name=user.real_name,
            email=user.email,
            phone=user.phone,
            avatar=user.avatar,
            status=user.status,
            tenant_id=user.tenant_id,
            authorities=list(authorities),
            created_time=user.created_time,
        )


class TokenResponse(CustomBaseModel):
    access_token: str = Field(..., description="Access token")
    refresh_token: str = Field(..., description="Refresh token")
    token_type: str = Field("Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: Optional[UserDTO] = Field(None, description="Authenticated user")


class MessageResponse(CustomBaseModel):
    message: str


class ErrorResponse(CustomBaseModel):
    error: str = Field(..., description="OAuth2 error code")
    error_description: str = Field(..., description="Human readable message")
    path: Optional[str] = Field(None, description="Request path")
