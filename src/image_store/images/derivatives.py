"""Planning of the resized variants produced for every upload."""

from collections.abc import Mapping
from typing import Any

from aws_lambda_powertools import Logger

from image_store.models.image import ImageDimensions

DerivativePlan = dict[str, ImageDimensions]

logger = Logger(UTC=True)


def plan_derivatives(image_sizes: Mapping[str, Mapping[str, Any]] | None) -> DerivativePlan:
    """Map each configured size to its dimension tag.

    ``{"thumb": {"width": 100}}`` becomes ``{"w100": ImageDimensions(width=100)}``.
    When two sizes produce the same tag the later one wins. Sizes with neither
    width nor height have no tag and are skipped.
    """
    plan: DerivativePlan = {}

    for size_name, size in (image_sizes or {}).items():
        dimensions = ImageDimensions.model_validate(dict(size))
        tag = dimensions.tag

        if not tag:
            logger.warning(
                "Image size has no dimensions, skipping",
                extra={"size": size_name},
            )
            continue

        if tag in plan:
            logger.warning(
                "Image sizes share a dimension tag, later size wins",
                extra={"size": size_name, "tag": tag},
            )

        plan[tag] = dimensions

    return plan
