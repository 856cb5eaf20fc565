# authgate/shared/middleware/rate_limiting_middleware.py (async version)

"""
Middleware for request rate limiting.

Counts requests per authenticated subject (the user id carried by the
bearer token). Runs before authentication, so the subject is read on a
best-effort basis: requests whose token cannot be read are left to the
authentication stage. A failing limiter lets traffic through; abuse
prevention is allowed to degrade, authentication is not.
"""

import logging
from typing import Callable, Iterable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from authgate.application.ports.outbound import IRateLimiter
from authgate.domain.exceptions import AuthGateException, InvalidTokenException, RateLimitExceededException
from authgate.domain.services.token_service import TokenService
from authgate.shared.utils.path_rules import path_matches
from authgate.shared.utils.token_extractor import extract_bearer_token

# Configure logger
logger = logging.getLogger(__name__)


class AsyncRateLimitingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that limits the number of requests per subject and window.
    """

    def __init__(
            self,
            app,
            *,
            rate_limiter: IRateLimiter,
            token_service: TokenService,
            limit: int = 200,
            enabled: bool = True,
            whitelist_paths: Iterable[str] = (),
    ):
        super().__init__(app)
        self.rate_limiter = rate_limiter
        self.token_service = token_service
        self.limit = limit
        self.enabled = enabled
        self.whitelist_paths = list(whitelist_paths)

    def _resolve_subject(self, token: str) -> Optional[str]:
        try:
            return str(self.token_service.get_user_id_from_token(token))
        except InvalidTokenException:
            return None

    async def dispatch(self, request: Request, call_next: Callable):
        path = request.url.path

        if not self.enabled or path_matches(path, self.whitelist_paths):
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            return await call_next(request)

        subject = self._resolve_subject(token)
        if subject is None:
            logger.debug(f"Rate limiting skipped for unreadable token on path: {path}")
            return await call_next(request)

        try:
            count = await self.rate_limiter.check_and_increment(subject)
        except Exception as e:
            logger.warning(f"Rate limiter unavailable, request not limited | Path: {path} | Error: {e}")
            return await call_next(request)

        reset_seconds = self.rate_limiter.window_seconds
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(max(0, self.limit - count)),
            "X-RateLimit-Reset": str(reset_seconds),
        }

        if count > self.limit:
            logger.warning(f"Rate limit exceeded for user {subject} on path: {path}")
            raise RateLimitExceededException(
                subject=subject,
                limit=self.limit,
                reset_seconds=reset_seconds,
                headers=headers,
            )

        # Process the request; rejections further in still report the count
        try:
            response = await call_next(request)
        except AuthGateException as exc:
            exc.headers = {**headers, **(exc.headers or {})}
            raise

        # Add informative rate limiting headers
        for name, value in headers.items():
            response.headers[name] = value
        return response
