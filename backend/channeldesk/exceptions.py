"""Application errors and the JSON error envelope they are rendered as."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from channeldesk.logger import api_logger


class AppError(Exception):
    """Base class for errors that map onto an HTTP error envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_envelope(self) -> dict:
        return {"success": False, "error": self.error, "message": self.message}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"
    default_message = "Invalid request"


class MissingEmail(ValidationError):
    default_message = "External account has no email address"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Access denied"
    default_message = "No token provided"


class UserNotFound(Unauthenticated):
    default_message = "User not found"


class InvalidExternalCredential(Unauthenticated):
    default_message = "Could not verify external credential"


class InvalidToken(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_message = "Invalid token"


class WrongTokenType(InvalidToken):
    default_message = "Invalid token type"


class ExternalAccessRequired(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_message = "YouTube access required"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
    default_message = "Resource already exists"


class ExternalServiceError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "External Service Error"
    default_message = "YouTube API request failed"


class InternalError(AppError):
    pass


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an application error as a JSON envelope."""
    if exc.status_code >= 500:
        api_logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        api_logger.info(
            f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}"
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Collapse FastAPI validation errors to the first message, as a 400."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationError(message).to_envelope(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log with traceback, answer with a 500 envelope."""
    api_logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_envelope(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to the FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
