"""Business logic for image upload operations.

This module turns an API payload into the temporary file the storage
expects, stores it with all of its derivatives and cleans up afterwards.
"""

import base64
import binascii
from pathlib import Path
import tempfile

from aws_lambda_powertools import Logger

from image_store.infrastructure.bootstrap import build_storage
from image_store.models.errors import MIMETypeError, ValidationError
from image_store.models.image import UploadRequest
from image_store.repositories.storage_repository import ImageStorageRepository
from image_store.utils.constants import ALLOWED_MIME_TYPES
from image_store.utils.mime import detect_mime_type

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for image uploads."""

    def __init__(self, storage: ImageStorageRepository | None = None) -> None:
        self.storage = storage or build_storage()

    @staticmethod
    def decode_file(encoded: str) -> bytes:
        """Decode base64-encoded image data.

        Raises:
            ValidationError: If decoding fails
        """
        try:
            return base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            logger.exception("Failed to decode base64 image data")
            raise ValidationError(
                message="Invalid image data",
                details={"encoding": "base64"},
            ) from exc

    def upload_image(
        self,
        *,
        file_name: str,
        file_data: bytes,
        content_type: str | None = None,
        target_dir: str | None = None,
    ) -> str:
        """Store an image and its derivatives, returning the public URL.

        Raises:
            MIMETypeError: If the image type is not supported
            ImageServiceError: If storing the image fails
        """
        mime_type = content_type or detect_mime_type(file_data)
        if mime_type not in ALLOWED_MIME_TYPES:
            logger.warning("Unsupported MIME type", extra={"mime_type": mime_type})
            raise MIMETypeError(
                message="Unsupported image type",
                details={"mime_type": mime_type},
            )

        with tempfile.NamedTemporaryFile(
            suffix=Path(file_name).suffix,
            delete=False,
        ) as tmp:
            tmp.write(file_data)
            tmp_path = Path(tmp.name)

        try:
            return self.storage.save(
                UploadRequest(path=str(tmp_path), name=file_name, type=mime_type),
                target_dir,
            )
        finally:
            tmp_path.unlink(missing_ok=True)
