"""Custom exception classes for the image storage adapter.

Every error carries a human readable ``message``, a machine readable
``error_code`` (defaulting to the class's code) and optional ``details``
that end up in API error responses.
"""

from typing import Any, ClassVar

from image_store.utils.constants import (
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_TRANSFORM_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_S3,
    ERROR_CODE_SOURCE_READ_FAILED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """Base exception for all image storage errors."""

    default_error_code: ClassVar[str | None] = None

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        code = error_code or self.default_error_code
        if code is None:
            raise TypeError(f"{type(self).__name__} requires an error_code")

        self.message = message
        self.error_code = code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class NotFoundError(ImageServiceError):
    """Raised when a requested image is not present in the store."""

    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class S3Error(ImageServiceError):
    """Raised when an object store operation fails."""

    default_error_code = ERROR_CODE_S3


class ImageUploadFailedError(S3Error):
    """Raised when putting an original or derivative into the store fails."""

    default_error_code = ERROR_CODE_IMAGE_UPLOAD_FAILED


class ImageDownloadFailedError(S3Error):
    """Raised when reading an object back from the store fails."""

    default_error_code = ERROR_CODE_IMAGE_DOWNLOAD_FAILED


class SourceFileReadError(ImageServiceError):
    """Raised when the uploaded temporary file cannot be read."""

    default_error_code = ERROR_CODE_SOURCE_READ_FAILED


class ImageTransformError(ImageServiceError):
    """Raised when a derivative cannot be produced from the source bytes."""

    default_error_code = ERROR_CODE_IMAGE_TRANSFORM_FAILED


class MIMETypeError(ImageServiceError):
    """Raised when an unsupported MIME type is provided."""

    default_error_code = ERROR_CODE_UNSUPPORTED_MIME_TYPE
