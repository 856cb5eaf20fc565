# authgate/shared/middleware/exception_middleware.py (async version)

"""
Middleware for centralized exception handling.

Outermost stage of the request pipeline: whatever goes wrong further in
(rate limiting, authentication, route handlers) leaves as an OAuth2-style
error body. Unexpected errors never expose their message or traceback.
"""

import time
import logging
from typing import Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from authgate.domain.exceptions import SERVER_ERROR, AuthGateException, RequestValidationException

# Configure logger
logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def error_response(exc: AuthGateException, path: str) -> JSONResponse:
    """Render an AuthGateException as ``{"error", "error_description", "path"}``."""
    content = exc.to_dict()
    content["path"] = path
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def server_error_response(path: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": SERVER_ERROR,
            "error_description": GENERIC_ERROR_MESSAGE,
            "path": path,
        },
    )


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "N/A"


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures application exceptions and formats the response accordingly.
    """

    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except AuthGateException as exc:
            log = logger.error if exc.status_code >= 500 else logger.warning
            log(
                f"Request rejected: {exc} | Status: {exc.status_code} | "
                f"Path: {request.url.path} | Client: {_client_host(request)}"
            )
            return error_response(exc, request.url.path)

        except Exception as exc:
            # Unhandled exceptions
            if self.environment == "production":
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | Client: {_client_host(request)}"
                )
            else:
                logger.exception(
                    f"Unhandled exception: {exc} | "
                    f"Path: {request.url.path} | Client: {_client_host(request)}"
                )
            return server_error_response(request.url.path)


def _validation_messages(exc: RequestValidationError) -> list:
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(location)
        message = error.get("msg", "invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """
    Handlers for exceptions raised inside route handlers and dependencies,
    which FastAPI resolves before they could reach the middleware.
    """

    @app.exception_handler(AuthGateException)
    async def auth_gate_exception_handler(request: Request, exc: AuthGateException):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"Request failed: {exc} | Path: {request.url.path}")
        return error_response(exc, request.url.path)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        error = RequestValidationException(_validation_messages(exc))
        logger.warning(f"Validation error: {error.description} | Path: {request.url.path}")
        return error_response(error, request.url.path)
