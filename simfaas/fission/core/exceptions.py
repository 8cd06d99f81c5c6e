"""
Custom exception classes.

Represent errors of the emulated Fission control plane and invocation path.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

FUNCTION_NOT_FOUND_MESSAGE = "function not found"


class FissionError(Exception):
    """Base exception class for the emulator."""

    pass


class InputError(FissionError):
    """Raised on malformed client input (body, parameters, service URL)."""

    pass


class FunctionNotFoundError(FissionError):
    """Raised when a function is unknown after the auto-creation policy ran."""

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(FUNCTION_NOT_FOUND_MESSAGE)


class BackendError(FissionError):
    """Raised when a custom response generator fails for a function."""

    def __init__(self, function_name: str, cause: Exception):
        self.function_name = function_name
        self.cause = cause
        super().__init__(str(cause))


class CustomHandlerNotFoundError(FissionError):
    """Raised when the resolved key has no registered response generator."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"custom handler not found: {key}")


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": str(exc)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})
