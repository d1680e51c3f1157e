"""Contracts for image file storage and its collaborators."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from image_store.models.image import ReadOptions, UploadRequest

JsonDict = dict[str, Any]

# API Gateway proxy handler: (event, context) -> response
RequestHandler = Callable[[JsonDict, Any], JsonDict]


class NamingService(Protocol):
    """Directory and collision-free file naming."""

    def get_target_dir(self, base_dir: str = "") -> str: ...

    def get_unique_base_name(self, image: UploadRequest, target_dirs: Sequence[str]) -> str: ...

    def get_unique_file_name(self, image: UploadRequest, target_dir: str) -> str: ...


class LocalStorageProtocol(NamingService, Protocol):
    """Local storage used as the fallback for reads and serving."""

    def read(self, options: ReadOptions | None = None) -> bytes: ...

    def serve(self) -> RequestHandler: ...


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image files.

    Implementations could be S3, GCS, local disk, etc.
    Handlers depend on this interface, not the implementation.
    """

    @abstractmethod
    def save(self, image: UploadRequest, target_dir: str | None = None) -> str:
        """Persist an uploaded image and return its public URL.

        Args:
            image: The uploaded file
            target_dir: Directory to store under; computed when omitted

        Returns:
            Public URL of the stored original

        Raises:
            ImageServiceError: If the image could not be stored
        """

    @abstractmethod
    def exists(self, file_name: str, target_dir: str) -> bool:
        """Return whether ``target_dir/file_name`` is stored. Never raises."""

    @abstractmethod
    def delete(self, file_name: str, target_dir: str | None = None) -> bool:
        """Delete ``target_dir/file_name``; ``False`` on any failure. Never raises."""

    @abstractmethod
    def read(self, options: ReadOptions | None = None) -> bytes:
        """Return the bytes stored at ``options.path``.

        Raises:
            NotFoundError: If nothing is stored there
        """

    @abstractmethod
    def serve(self) -> RequestHandler:
        """Return a request handler that serves stored images."""
