# authgate/domain/services/token_service.py

"""
Token issuance and validation.

Access and refresh tokens share one claim layout and differ only in
``token_type``, lifetime, and the authorities claim (access tokens only).
Every token gets a fresh UUID ``jti`` that doubles as its blacklist key.
"""

import logging
import time
import uuid
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from authgate.application.ports.outbound import ITokenBlacklist, ITokenCodec
from authgate.domain.exceptions import (
    InvalidTokenException,
    TokenExpiredException,
    TokenRevokedException,
    TokenStatusUnavailableException,
)
from authgate.domain.models.token_model import ADDITIONAL_CLAIMS, TokenClaims, TokenKind

logger = logging.getLogger(__name__)


class TokenService:

    def __init__(
            self,
            codec: ITokenCodec,
            blacklist: ITokenBlacklist,
            signing_key: str,
            *,
            issuer: str = "authgate",
            access_ttl: timedelta = timedelta(hours=1),
            refresh_ttl: timedelta = timedelta(days=7),
            clock: Callable[[], float] = time.time,
    ):
        self.codec = codec
        self.blacklist = blacklist
        self._signing_key = signing_key
        self.issuer = issuer
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock

    # ── Issuance ─────────────────────────────────────────────────────────────

    def generate_access_token(
            self,
            username: str,
            user_id: int,
            authorities: Iterable[str],
            additional_claims: Optional[Mapping[str, Any]] = None,
    ) -> str:
        claims = self._base_claims(username, user_id, TokenKind.ACCESS, additional_claims)
        claims["authorities"] = list(authorities)
        return self.codec.issue(claims, self._signing_key, self.access_ttl)

    def generate_refresh_token(
            self,
            username: str,
            user_id: int,
            additional_claims: Optional[Mapping[str, Any]] = None,
    ) -> str:
        claims = self._base_claims(username, user_id, TokenKind.REFRESH, additional_claims)
        return self.codec.issue(claims, self._signing_key, self.refresh_ttl)

    def _base_claims(
            self,
            username: str,
            user_id: int,
            kind: TokenKind,
            additional_claims: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        claims: Dict[str, Any] = {
            name: value
            for name, value in (additional_claims or {}).items()
            if name in ADDITIONAL_CLAIMS and value is not None
        }
        claims.update(
            sub=username,
            user_id=user_id,
            token_type=kind.value,
            jti=str(uuid.uuid4()),
            iss=self.issuer,
        )
        return claims

    # ── Validation ───────────────────────────────────────────────────────────

    def parse_token(self, token: str) -> TokenClaims:
        """Signature-checked claims. Expiry and revocation are not checked."""
        return self.codec.parse(token, self._signing_key)

    async def verify_token(self, token: str) -> TokenClaims:
        """
        Full validation: signature, expiry, then revocation.

        Raises:
            TokenMalformedException / TokenSignatureInvalidException
            TokenExpiredException
            TokenRevokedException
            TokenStatusUnavailableException: the blacklist could not be consulted
        """
        claims = self.parse_token(token)

        if claims.exp <= self._clock():
            raise TokenExpiredException()

        try:
            revoked = await self.blacklist.contains(claims.jti)
        except Exception as e:
            # Revocation status unknown: do not trust the token
            logger.error(f"Blacklist lookup failed for token {claims.jti}: {e}")
            raise TokenStatusUnavailableException() from e

        if revoked:
            raise TokenRevokedException()
        return claims

    async def verify_access_token(self, token: str) -> TokenClaims:
        """``verify_token`` that also refuses refresh tokens presented as credentials."""
        claims = await self.verify_token(token)
        if claims.is_refresh:
            raise InvalidTokenException("Refresh token cannot be used to access resources")
        return claims

    async def validate_token(self, token: str) -> bool:
        try:
            await self.verify_token(token)
        except InvalidTokenException as e:
            logger.debug(f"Token rejected: {e.description}")
            return False
        return True

    def is_refresh_token(self, token: str) -> bool:
        try:
            return self.parse_token(token).is_refresh
        except InvalidTokenException:
            return False

    # ── Accessors ────────────────────────────────────────────────────────────

    def get_username_from_token(self, token: str) -> str:
        """Raises InvalidTokenException when the token cannot be parsed."""
        return self.parse_token(token).sub

    def get_user_id_from_token(self, token: str) -> int:
        """Raises InvalidTokenException when the token cannot be parsed."""
        return self.parse_token(token).user_id

    def get_authorities_from_token(self, token: str) -> List[str]:
        try:
            return list(self.parse_token(token).authorities or [])
        except InvalidTokenException:
            return []

    def get_token_id(self, token: str) -> Optional[str]:
        try:
            return self.parse_token(token).jti
        except InvalidTokenException:
            return None

    def get_token_expiration_seconds(self, token: str) -> int:
        """Remaining lifetime in seconds, 0 once expired, -1 if unparsable."""
        try:
            claims = self.parse_token(token)
        except InvalidTokenException:
            return -1
        return max(0, int(claims.exp - self._clock()))

    # ── Revocation ───────────────────────────────────────────────────────────

    async def revoke_token(self, token: str) -> TokenClaims:
        """Blacklist the token until its own expiry. Returns its claims."""
        claims = self.parse_token(token)
        await self.blacklist.add(claims.jti, claims.expires_at_millis)
        logger.info(f"Token {claims.jti} ({claims.token_type.value}) of user '{claims.sub}' revoked")
        return claims
