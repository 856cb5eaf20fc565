# authgate/shared/middleware/__init__.py (async version)

from authgate.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from authgate.shared.middleware.jwt_auth_middleware import AsyncJWTAuthenticationMiddleware, AuthHooks
from authgate.shared.middleware.rate_limiting_middleware import AsyncRateLimitingMiddleware

# Export all for easy imports
__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncJWTAuthenticationMiddleware",
    "AsyncRateLimitingMiddleware",
    "AuthHooks",
]
