# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Error taxonomy and the handlers that turn it into HTTP responses.

Every domain failure is an ``AppError`` subclass carrying its HTTP status and
a message that is safe to show to the caller.  Handlers registered by
:func:`register_exception_handlers` render all of them with the same
envelope::

    {"success": false, "message": "..."}

Anything that is *not* an ``AppError`` is logged with its traceback and
reported as a generic 500 – no internal detail leaves the process.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logger import logger


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# -- 401 -------------------------------------------------------------------


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"


class MissingTokenError(AuthError):
    message = "No token, authorization denied"


class InvalidTokenError(AuthError):
    message = "Invalid token"


class ExpiredTokenError(AuthError):
    message = "Token expired"


class CredentialError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    # Same text for unknown email and wrong password
    message = "Invalid credentials"


class UserNotFoundError(CredentialError):
    pass


class BadPasswordError(CredentialError):
    pass


class DuplicateEmailError(CredentialError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists"


# -- 400 -------------------------------------------------------------------


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"


class UnsupportedTypeError(ValidationError):
    message = "File type not allowed"


class TooLargeError(ValidationError):
    message = "File too large"


class TooManyFilesError(ValidationError):
    message = "Too many files"


class NoFileError(ValidationError):
    message = "No file provided"


class BatchPartialFailureError(ValidationError):
    """One file of a batch failed; the whole batch was rejected."""

    def __init__(self, filename: str, cause: ValidationError):
        self.filename = filename
        self.cause = cause
        super().__init__(f"{cause.message}: {filename} (no files were stored)")


# -- 403 / 404 -------------------------------------------------------------


class AuthzError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class ForbiddenError(AuthzError):
    pass


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class UserNotFound(NotFoundError):
    message = "User not found"


class ProductNotFound(NotFoundError):
    message = "Product not found"


class FileNotFound(NotFoundError):
    message = "File not found"


# -- storage ---------------------------------------------------------------
# Raised by repositories; callers translate them into the domain errors above.


class StorageError(Exception):
    pass


class DuplicateKeyError(StorageError):
    def __init__(self, key: str, value):
        self.key = key
        self.value = value
        super().__init__(f"duplicate value for {key}")


class RecordNotFoundError(StorageError):
    pass


# ---------------------------------------------------------------------------
# FastAPI wiring
# ---------------------------------------------------------------------------


def _envelope(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
    )


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "%s %s rejected: %s (%d)",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc.status_code,
    )
    return _envelope(exc.status_code, exc.message)


async def _validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in jsonable_encoder(exc.errors())
    ]
    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = str(exc.detail)
    return _envelope(exc.status_code, message)


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, AppError.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
