"""Filesystem-backed image storage used as the fallback for remote misses."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger

from image_store.images.naming import StorageNaming
from image_store.models.errors import NotFoundError
from image_store.models.image import ReadOptions, UploadRequest
from image_store.repositories.storage_repository import JsonDict, RequestHandler
from image_store.utils.constants import DEFAULT_BINARY_CONTENT_TYPE
from image_store.utils.mime import detect_mime_type
from image_store.utils.paths import strip_trailing_separator
from image_store.utils.response import ResponseBuilder

logger = Logger(UTC=True)


class LocalFileStorage:
    """Images stored below a root directory on local disk."""

    def __init__(self, storage_path: str | Path) -> None:
        self.storage_path = Path(storage_path)
        self._naming = StorageNaming(exists=self.exists)

    def exists(self, file_name: str, target_dir: str) -> bool:
        try:
            return self._resolve(str(Path(target_dir) / file_name)).is_file()
        except NotFoundError:
            return False

    def get_target_dir(self, base_dir: str = "") -> str:
        return self._naming.get_target_dir(base_dir)

    def get_unique_base_name(self, image: UploadRequest, target_dirs: Sequence[str]) -> str:
        return self._naming.get_unique_base_name(image, target_dirs)

    def get_unique_file_name(self, image: UploadRequest, target_dir: str) -> str:
        return self._naming.get_unique_file_name(image, target_dir)

    def read(self, options: ReadOptions | None = None) -> bytes:
        """Read a file relative to the storage root.

        Raises:
            NotFoundError: If the file is missing or outside the storage root
        """
        path = strip_trailing_separator((options or ReadOptions()).path)
        target = self._resolve(path)

        try:
            return target.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFoundError(
                message="Image not found",
                details={"path": path},
            ) from exc

    def serve(self) -> RequestHandler:
        def handler(event: JsonDict, context: Any) -> JsonDict:
            path = event.get("path") or ""

            try:
                content = self.read(ReadOptions(path=path))
            except NotFoundError:
                logger.info("Local image not found", extra={"path": path})
                return ResponseBuilder.not_found(f"Image not found: {path}")

            return ResponseBuilder.binary_response(
                content,
                content_type=detect_mime_type(content) or DEFAULT_BINARY_CONTENT_TYPE,
            )

        return handler

    def _resolve(self, relative_path: str) -> Path:
        root = self.storage_path.resolve()
        target = (root / relative_path.lstrip("/\\")).resolve()

        if target != root and root not in target.parents:
            raise NotFoundError(
                message="Image not found",
                details={"path": relative_path},
            )

        return target
