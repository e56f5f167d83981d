"""
Global exception handlers and custom exception classes.

Services raise the exceptions defined here instead of returning error
strings; the handlers turn them into the ``{"error": ..., "code": ...}``
envelope every endpoint uses.
"""
from enum import Enum
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

# Set up logging
logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable error codes returned alongside error messages."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_STATE = "INVALID_STATE"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.
    """
    def __init__(self, status_code: int, detail: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.code = code


class ValidationException(AppException):
    """Raised when request data fails business validation."""
    def __init__(self, detail: str = "Invalid request data"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, ErrorCode.VALIDATION_ERROR)


class NotFoundException(AppException):
    """Raised when a requested resource does not exist."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail, ErrorCode.NOT_FOUND)


class AlreadyExistsException(AppException):
    """Raised when creating something that already exists."""
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status.HTTP_409_CONFLICT, detail, ErrorCode.ALREADY_EXISTS)


class InvalidCredentialsException(AppException):
    """Raised when a password does not match."""
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, ErrorCode.INVALID_CREDENTIALS)


class AuthenticationException(AppException):
    """Raised when a bearer token is missing, invalid or expired."""
    def __init__(self, detail: str = "Unauthorized: Invalid token"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, ErrorCode.UNAUTHORIZED)


class PermissionDeniedException(AppException):
    """Raised when the caller is authenticated but not allowed to act."""
    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, ErrorCode.FORBIDDEN)


class InvalidStateException(AppException):
    """Raised when a resource is not in a state that allows the operation."""
    def __init__(self, detail: str = "Invalid state for this operation",
                 status_code: int = status.HTTP_409_CONFLICT):
        super().__init__(status_code, detail, ErrorCode.INVALID_STATE)


class ExternalServiceException(AppException):
    """Raised when mail, storage or the LLM API fails in a way the caller must see."""
    def __init__(self, detail: str = "External service error"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, ErrorCode.EXTERNAL_SERVICE_ERROR)


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    if exc.status_code >= 500:
        logger.error(f"Application error on {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"Request to {request.url.path} rejected ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": exc.code.value}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for framework HTTP errors (unknown routes, wrong methods).
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "code": ErrorCode.VALIDATION_ERROR.value,
            "errors": jsonable_encoder(exc.errors())
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Last-resort handler so unexpected failures still use the error envelope.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": ErrorCode.INTERNAL_ERROR.value}
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
