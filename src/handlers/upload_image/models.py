"""Pydantic models for image upload request/response."""

import base64
import binascii
from pathlib import Path

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_store.utils.constants import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    get_max_file_size_mb,
)

logger = Logger(UTC=True)


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    file_name: str = Field(
        ..., min_length=1, max_length=255, description="Original image file name"
    )
    content_type: str | None = Field(
        None, description="Declared MIME type; detected from the bytes when omitted"
    )
    target_dir: str | None = Field(
        None, max_length=1024, description="Directory to store under"
    )

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, value: str) -> str:
        suffix = Path(value).suffix.lower().lstrip(".")

        if not suffix:
            raise ValueError("Image name must have an extension")

        if suffix not in ALLOWED_EXTENSIONS:
            raise ValueError(
                f"Invalid image extension '{suffix}'. "
                f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )

        return value

    @field_validator("content_type")
    @classmethod
    def validate_content_type(cls, value: str | None) -> str | None:
        if value is not None and value not in ALLOWED_MIME_TYPES:
            raise ValueError(f"Invalid content type '{value}'")
        return value

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must not exceed MAX_FILE_SIZE
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except binascii.Error as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(
                f"File size exceeds {get_max_file_size_mb()}MB limit"
            )

        return value


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    url: str = Field(..., description="Public URL of the stored original")
    file_name: str = Field(..., description="Uploaded file name")
    message: str = Field(..., description="Success message")
