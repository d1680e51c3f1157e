"""
Lambda handler responsible for deleting a stored image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from image_store.infrastructure.bootstrap import build_storage
from image_store.utils.decorators import api_gateway_handler
from image_store.utils.response import ResponseBuilder
from image_store.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteImageRequest, DeleteImageResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    The storage never raises on delete; a failed delete is reported as
    ``deleted: false`` with a 200 response.
    """
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(
            DeleteImageRequest,
            {
                "file_name": path_params.get("file_name"),
                "target_dir": query_params.get("target_dir"),
            },
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(list(exc.errors()))},
        )

    storage = build_storage()
    deleted = storage.delete(request.file_name, request.target_dir)

    metrics.add_metric(
        name="ImagesDeleted" if deleted else "ImageDeleteFailures",
        unit=MetricUnit.Count,
        value=1,
    )

    response = DeleteImageResponse(
        file_name=request.file_name,
        deleted=deleted,
        message="Image deleted successfully" if deleted else "Image could not be deleted",
    )

    return ResponseBuilder.ok(response.model_dump())
