# authgate/shared/utils/token_extractor.py

from typing import Optional

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Token from an ``Authorization: Bearer <token>`` header value.

    The scheme is matched case-insensitively; blank tokens count as absent.
    """
    if not authorization:
        return None
    if authorization[:len(BEARER_PREFIX)].lower() != BEARER_PREFIX:
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None
