"""
Lambda handler responsible for image upload.
"""

import base64
import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from image_store.models.errors import ImageServiceError, MIMETypeError, ValidationError
from image_store.utils.decorators import api_gateway_handler
from image_store.utils.response import ResponseBuilder
from image_store.utils.validators import sanitize_validation_errors, validate_request

from .models import ImageUploadRequest, ImageUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler decodes the base64 image, validates the payload, stores the
    original plus every derivative and returns the original's public URL.

    Expected API Gateway event structure:
    {
        "body": "{...}",           # JSON string containing upload data
        "isBase64Encoded": false
    }
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    raw_body = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        raw_body = base64.b64decode(raw_body).decode("utf-8")

    try:
        body = json.loads(raw_body)
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(ImageUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(list(exc.errors()))},
        )

    try:
        file_data = UploadService.decode_file(request.file)
        service = UploadService()

        url = service.upload_image(
            file_name=request.file_name,
            file_data=file_data,
            content_type=request.content_type,
            target_dir=request.target_dir,
        )

    except (ValidationError, MIMETypeError) as exc:
        logger.exception(
            "Validation error during image upload",
            extra={"file_name": request.file_name},
        )
        return ResponseBuilder.validation_error(message=exc.message, error=exc.error_code)

    except ImageServiceError as exc:
        logger.exception(
            "Storage error during image upload",
            extra={"file_name": request.file_name},
        )
        metrics.add_metric(name="ImageUploadFailures", unit=MetricUnit.Count, value=1)
        return ResponseBuilder.internal_error(exc.message)

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)

    response = ImageUploadResponse(
        url=url,
        file_name=request.file_name,
        message="Image uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump())
