"""
Decorator translating storage errors into API Gateway responses.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from image_store.models.errors import ImageServiceError, NotFoundError, ValidationError
from image_store.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]
Handler = Callable[..., JsonDict]

_FRIENDLY_PREFIXES = (
    "Invalid",
    "Missing",
    "Required",
    "Must",
    "Cannot",
    "Unable to",
    "Image",
    "File",
)

_CLIENT_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


def _get_user_friendly_message(exc: Exception) -> str:
    """Keep messages that already read well, replace the rest."""
    text = str(exc)

    if text and text.startswith(_FRIENDLY_PREFIXES):
        return text

    if isinstance(exc, ValueError):
        return "The provided data is invalid. Please check your input and try again."

    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."

    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."

    return "We encountered an issue processing your request. Please try again."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    server_side: bool = False,
) -> None:
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if server_side:
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def _error_response(
    exc: Exception,
    *,
    handler_name: str,
    request_id: str | None,
    cors_origin: str | None,
) -> JsonDict:
    """Map an exception escaping a handler to its HTTP response."""
    log = dict(handler_name=handler_name, request_id=request_id, exc=exc)
    common = dict(request_id=request_id, cors_origin=cors_origin)

    if isinstance(exc, NotFoundError):
        _log_error("Image not found", **log)
        return ResponseBuilder.not_found(exc.message, **common)

    if isinstance(exc, ValidationError):
        _log_error("Validation error in handler", **log)
        return ResponseBuilder.validation_error(
            message=exc.message,
            error=exc.error_code,
            details=exc.details,
            **common,
        )

    if isinstance(exc, ImageServiceError):
        _log_error("Storage error in handler", server_side=True, **log)
        return ResponseBuilder.internal_error(exc.message, **common)

    if isinstance(exc, _CLIENT_ERRORS):
        _log_error("Invalid request in handler", **log)
        return ResponseBuilder.bad_request(_get_user_friendly_message(exc), **common)

    if isinstance(exc, (ConnectionError, OSError)):
        _log_error("Connection error", server_side=True, **log)
        return ResponseBuilder.error(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            message="Unable to connect to required services. Please try again later.",
            **common,
        )

    _log_error("Unexpected error in handler", server_side=True, **log)
    return ResponseBuilder.internal_error(
        "We're experiencing technical difficulties. Please try again in a few moments.",
        **common,
    )


def api_gateway_handler(func: Handler) -> Handler:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight requests itself and turns any exception raised by
    the handler into an error response carrying the request ID:
    ``NotFoundError`` → 404, ``ValidationError`` → 422, other storage errors
    → 500, malformed input → 400, unreachable services → 503.
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return {
                "statusCode": HTTPStatus.NO_CONTENT.value,
                "headers": ResponseBuilder._build_headers(cors_origin),
                "body": "",
            }

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)
        except Exception as exc:
            return _error_response(
                exc,
                handler_name=func.__name__,
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
