# authgate/adapters/outbound/security/token_codec.py

"""
JWS compact token codec built on python-jose.

The MAC is always verified before any claim is decoded. Expiry is left to
the token service so that expired tokens can still be inspected (logout,
refresh rotation).
"""

import json
import logging
import time
from datetime import timedelta
from typing import Any, Callable, Mapping

from jose import jws, jwt
from jose.exceptions import JWSError
from pydantic import ValidationError

from authgate.application.ports.outbound import ITokenCodec
from authgate.domain.exceptions import TokenMalformedException, TokenSignatureInvalidException
from authgate.domain.models.token_model import TokenClaims

logger = logging.getLogger(__name__)


class JoseTokenCodec(ITokenCodec):
    """HMAC signed tokens (HS256 by default)."""

    def __init__(self, algorithm: str = "HS256", clock: Callable[[], float] = time.time):
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, claims: Mapping[str, Any], signing_key: str, ttl: timedelta) -> str:
        issued_at = int(self._clock())
        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + int(ttl.total_seconds())

        # Validate before signing so nothing unparsable is ever handed out
        token_claims = TokenClaims.model_validate(payload)
        return jwt.encode(token_claims.to_payload(), signing_key, algorithm=self.algorithm)

    def parse(self, token: str, signing_key: str) -> TokenClaims:
        if not token or not isinstance(token, str):
            raise TokenMalformedException("Token is empty")

        try:
            header = jws.get_unverified_header(token)
        except JWSError as e:
            raise TokenMalformedException() from e

        if header.get("alg") != self.algorithm:
            logger.warning(f"Rejected token signed with unexpected algorithm: {header.get('alg')!r}")
            raise TokenMalformedException("Unsupported token algorithm")

        # The token is well formed at this point, so a failure is the MAC
        try:
            raw_payload = jws.verify(token, signing_key, algorithms=[self.algorithm])
        except JWSError as e:
            raise TokenSignatureInvalidException() from e

        try:
            payload = json.loads(raw_payload)
        except ValueError as e:
            raise TokenMalformedException("Token payload is not valid JSON") from e
        if not isinstance(payload, dict):
            raise TokenMalformedException("Token payload is not a claims object")

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise TokenMalformedException("Token claims are invalid") from e
