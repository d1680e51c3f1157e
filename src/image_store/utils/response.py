"""
API Gateway proxy responses for the image handlers.

JSON responses always carry the CORS headers. Image bytes are returned
base64-encoded with ``isBase64Encoded`` set so API Gateway decodes them.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from image_store.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from image_store.utils.time import utc_now_iso

JsonDict = dict[str, Any]


def _encode(content: bytes) -> str:
    return base64.b64encode(content).decode("utf-8")


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    DEFAULT_CORS_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @staticmethod
    def _build_headers(cors_origin: str | None = None) -> dict[str, str]:
        headers = {"Content-Type": DEFAULT_CONTENT_TYPE, **ResponseBuilder.DEFAULT_CORS_HEADERS}

        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin

        return headers

    @staticmethod
    def _json(
        status: HTTPStatus,
        payload: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        body = dict(payload)
        if request_id:
            body["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": json.dumps(body),
        }

    @staticmethod
    def ok(body: JsonDict, **kwargs: Any) -> JsonDict:
        return ResponseBuilder._json(HTTPStatus.OK, body, **kwargs)

    @staticmethod
    def created(body: JsonDict, **kwargs: Any) -> JsonDict:
        return ResponseBuilder._json(HTTPStatus.CREATED, body, **kwargs)

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Error envelope: ``{error, message, timestamp, details?}``."""
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }

        if details:
            payload["details"] = details

        return ResponseBuilder._json(
            status,
            payload,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def bad_request(message: str, **kwargs: Any) -> JsonDict:
        return ResponseBuilder.error(status=HTTPStatus.BAD_REQUEST, message=message, **kwargs)

    @staticmethod
    def validation_error(
        *,
        message: str,
        error: str = ERROR_CODE_VALIDATION_FAILED,
        **kwargs: Any,
    ) -> JsonDict:
        """422 Unprocessable Entity, keyed by the domain error code."""
        return ResponseBuilder.error(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            message=message,
            error=error,
            **kwargs,
        )

    @staticmethod
    def not_found(message: str = "Image not found", **kwargs: Any) -> JsonDict:
        return ResponseBuilder.error(status=HTTPStatus.NOT_FOUND, message=message, **kwargs)

    @staticmethod
    def internal_error(message: str = "Internal server error", **kwargs: Any) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            **kwargs,
        )

    @staticmethod
    def binary_response(
        content: bytes,
        *,
        content_type: str,
        headers: Mapping[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Image bytes served from local storage."""
        response_headers: dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
            "Access-Control-Expose-Headers": EXPOSE_HEADERS,
        }

        if cors_origin:
            response_headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)
            response_headers["Access-Control-Allow-Origin"] = cors_origin

        if headers:
            response_headers.update(headers)

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": _encode(content),
            "isBase64Encoded": True,
        }

    @staticmethod
    def proxy_response(
        content: bytes,
        *,
        upstream_headers: Mapping[str, str],
        status: HTTPStatus = HTTPStatus.OK,
    ) -> JsonDict:
        """Image bytes fetched from the store, with its headers passed through."""
        return {
            "statusCode": status.value,
            "headers": dict(upstream_headers),
            "body": _encode(content),
            "isBase64Encoded": True,
        }
