"""Error types raised by services and the middleware that renders them."""

import logging
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError as PostgrestAPIError

from dormmate.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Error returned to the client as an :class:`ErrorResponse`."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "api_error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None, details: list[dict[str, Any]] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class ValidationError(APIError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "validation_error"
    default_message = "Validation error"


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"
    default_message = "Authentication required"


class AuthorizationError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "authorization_error"
    default_message = "Access denied"


class StorageError(APIError):
    """The backing store rejected or failed a request."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_type = "storage_error"
    default_message = "Storage request failed"

    @classmethod
    def from_postgrest(cls, error: PostgrestAPIError) -> "StorageError":
        """Wrap a PostgREST error, keeping its code and hint as details."""
        details = None
        if error.code:
            details = [{"type": error.code, "msg": error.hint or error.message or error.code}]
        return cls(error.message, details=details)


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    error_response = ErrorResponse.from_exception(
        error_type=error_type,
        message=message,
        details=details,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


def render_api_error(error: APIError, request_id: str | None) -> JSONResponse:
    return create_error_response(
        error_type=error.error_type,
        message=error.message,
        status_code=error.status_code,
        details=error.details,
        request_id=request_id,
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Render every escaping exception as an :class:`ErrorResponse`.

    Unexpected exceptions are logged with their traceback and reported to
    the client as a generic ``internal_error``.
    """
    request_id = request.headers.get("X-Request-ID")
    log_extra = {"request_id": request_id}

    try:
        return await call_next(request)
    except PostgrestAPIError as e:
        logger.error("Storage error: %s (code=%s)", e.message, e.code, extra=log_extra)
        return render_api_error(StorageError.from_postgrest(e), request_id)
    except APIError as e:
        logger.warning("API error: %s - %s", e.error_type, e.message, extra=log_extra)
        return render_api_error(e, request_id)
    except HTTPException as e:
        logger.warning("HTTP exception: %s - %s", e.status_code, e.detail, extra=log_extra)
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
        )
    except Exception:
        logger.exception("Unhandled exception", extra=log_extra)
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
