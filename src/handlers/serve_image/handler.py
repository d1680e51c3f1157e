"""
Lambda handler proxying stored images, with local storage as the fallback.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from image_store.infrastructure.bootstrap import build_storage
from image_store.utils.decorators import api_gateway_handler

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Serve the object at ``event["path"]`` as a binary response."""
    logger.info(
        "Received image serve request",
        extra={
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    response = build_storage().serve()(event, context)

    metrics.add_metric(
        name="ImagesServed" if response["statusCode"] == 200 else "ImageServeMisses",
        unit=MetricUnit.Count,
        value=1,
    )
    return response
