"""S3-backed implementation of ImageStorageRepository."""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from contextlib import closing
import posixpath
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from image_store.images.derivatives import DerivativePlan, plan_derivatives
from image_store.images.naming import StorageNaming
from image_store.images.transform import resize_from_buffer
from image_store.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from image_store.infrastructure.aws.client_factory import S3ClientFactory
from image_store.models.configuration import StorageConfiguration
from image_store.models.errors import (
    ImageDownloadFailedError,
    ImageUploadFailedError,
    NotFoundError,
    SourceFileReadError,
)
from image_store.models.image import (
    ImageDimensions,
    ReadOptions,
    UploadDescriptor,
    UploadRequest,
)
from image_store.repositories.storage_repository import (
    ImageStorageRepository,
    JsonDict,
    LocalStorageProtocol,
    NamingService,
    RequestHandler,
)
from image_store.themes.registry import ThemeRegistry
from image_store.utils.constants import (
    CACHE_CONTROL,
    DERIVATIVE_DIR,
    ORIGINAL_DIR,
    RESIZABLE_MIME_TYPES,
    THEME_IMAGE_SIZES_KEY,
)
from image_store.utils.paths import (
    strip_leading_slash,
    strip_trailing_separator,
    strip_trailing_slash,
)
from image_store.utils.response import ResponseBuilder

Resizer = Callable[[bytes, ImageDimensions], bytes]

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "404"})

logger = Logger(UTC=True)


class S3ImageStorage(ImageStorageRepository):
    """Image storage backed by S3, with local storage as the read/serve fallback.

    Every upload is stored as an original plus one resized derivative per
    image size of the active theme::

        <prefix>/<dir>/original/<name>
        <prefix>/<dir>/size/<tag>/<name>
    """

    def __init__(
        self,
        config: StorageConfiguration,
        *,
        local: LocalStorageProtocol,
        themes: ThemeRegistry,
        adapter: S3AdapterProtocol | None = None,
        naming: NamingService | None = None,
        resize: Resizer = resize_from_buffer,
        max_workers: int | None = None,
    ) -> None:
        self._config = config
        self._local = local
        self._themes = themes
        self._s3 = adapter or S3Adapter(
            bucket=config.bucket,
            factory=S3ClientFactory(config),
        )
        self._naming = naming or StorageNaming(exists=self.exists)
        self._resize = resize
        self._max_workers = max_workers

    @property
    def config(self) -> StorageConfiguration:
        return self._config

    def get_target_dir(self, base_dir: str = "") -> str:
        return self._naming.get_target_dir(base_dir)

    def save(self, image: UploadRequest, target_dir: str | None = None) -> str:
        """Upload the original and every derivative; return the original's URL.

        One base name, free in the original directory and in every derivative
        directory, is resolved while the file is read; both must succeed
        before any upload starts. Types Pillow cannot decode (SVG) are stored
        without derivatives. All uploads then run in parallel and the
        save fails if any one of them fails. Objects that were already
        written stay in the bucket unless ``cleanup_on_failure`` is set.

        Raises:
            SourceFileReadError: If the uploaded file cannot be read
            ImageUploadFailedError: If any put into the store fails
            ImageTransformError: If a derivative cannot be produced
        """
        directory = target_dir or self.get_target_dir(self._config.path_prefix)
        plan = self._plan_for(image)
        original_dir = posixpath.join(directory, ORIGINAL_DIR)
        derivative_dirs = {
            tag: posixpath.join(directory, DERIVATIVE_DIR, tag) for tag in plan
        }

        logger.debug(
            "Saving image",
            extra={
                "image_name": image.name,
                "directory": directory,
                "derivatives": list(plan),
            },
        )

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            name_future = executor.submit(
                self._naming.get_unique_base_name,
                image,
                [original_dir, *derivative_dirs.values()],
            )
            file_future = executor.submit(self._read_source, image.path)

            file_name = name_future.result()
            file_data = file_future.result()

            base = UploadDescriptor(
                acl=self._config.acl,
                body=file_data,
                bucket=self._config.bucket,
                cache_control=CACHE_CONTROL,
                content_type=image.type,
                key=strip_leading_slash(posixpath.join(original_dir, file_name)),
                server_side_encryption=self._config.server_side_encryption or None,
            )

            futures: dict[Future[str], str] = {executor.submit(self._put, base): ORIGINAL_DIR}
            for tag, dimensions in plan.items():
                future = executor.submit(
                    self._save_derivative,
                    base,
                    key=strip_leading_slash(posixpath.join(derivative_dirs[tag], file_name)),
                    dimensions=dimensions,
                )
                futures[future] = tag

            uploaded, failures = self._collect(futures)

        if failures:
            logger.error(
                "Image save failed",
                extra={
                    "key": base.key,
                    "failed": [tag for tag, _ in failures],
                    "uploaded": len(uploaded),
                },
            )

            if self._config.cleanup_on_failure:
                self._remove_uploaded(uploaded)

            raise failures[0][1]

        logger.info(
            "Image saved successfully",
            extra={"key": base.key, "derivatives": len(plan)},
        )
        return f"{self._config.host}/{base.key}"

    def exists(self, file_name: str, target_dir: str) -> bool:
        key = strip_leading_slash(posixpath.join(target_dir, file_name))

        try:
            response = self._s3.get_object(key=key)
            response["Body"].close()
        except Exception:
            logger.debug("Object not available", extra={"key": key})
            return False

        return True

    def delete(self, file_name: str, target_dir: str | None = None) -> bool:
        directory = target_dir or self.get_target_dir(self._config.path_prefix)
        key = strip_leading_slash(posixpath.join(directory, file_name))

        try:
            self._s3.delete_object(key=key)
        except Exception:
            logger.warning("S3 deletion failed", extra={"key": key})
            return False

        logger.info("Image deleted successfully", extra={"key": key})
        return True

    def read(self, options: ReadOptions | None = None) -> bytes:
        """Read bytes hosted under the public host, else from local storage.

        Raises:
            NotFoundError: If the remote object does not exist
            ImageDownloadFailedError: If the remote read fails otherwise
        """
        path = strip_trailing_separator(options.path if options else "")

        if not path.startswith(self._config.host):
            return self._local.read(options)

        key = strip_leading_slash(path[len(self._config.host) :])
        logger.debug("Reading image from S3", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            with closing(response["Body"]) as body:
                data: bytes = body.read()
            return data

        except ClientError as exc:
            logger.error("S3 download failed", extra={"key": key})

            if exc.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                raise NotFoundError(
                    message="Image not found",
                    details={"key": key},
                ) from exc

            raise ImageDownloadFailedError(
                message="Unable to download image at this time",
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error downloading image")
            raise ImageDownloadFailedError(
                message="Unable to download image at this time",
                details={"key": key},
            ) from exc

    def serve(self) -> RequestHandler:
        """Proxy stored objects, falling back to local serving on any S3 error."""

        def handler(event: JsonDict, context: Any) -> JsonDict:
            key = strip_leading_slash(
                strip_trailing_slash(self._config.path_prefix) + (event.get("path") or "")
            )

            try:
                response = self._s3.get_object(key=key)
                headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})
                with closing(response["Body"]) as body:
                    content = b"".join(body.iter_chunks())

            except (ClientError, BotoCoreError) as exc:
                logger.info(
                    "Serving image from local storage",
                    extra={"key": key, "error": str(exc)},
                )
                return self._local.serve()(event, context)

            return ResponseBuilder.proxy_response(content, upstream_headers=headers)

        return handler

    @staticmethod
    def _read_source(path: str) -> bytes:
        try:
            with open(path, "rb") as source:
                return source.read()
        except OSError as exc:
            logger.error("Unable to read uploaded file", extra={"path": path})
            raise SourceFileReadError(
                message="Unable to read uploaded image",
                details={"path": path},
            ) from exc

    def _save_derivative(
        self,
        base: UploadDescriptor,
        *,
        key: str,
        dimensions: ImageDimensions,
    ) -> str:
        transformed = self._resize(base.body, dimensions)
        return self._put(base.model_copy(update={"body": transformed, "key": key}))

    def _plan_for(self, image: UploadRequest) -> DerivativePlan:
        if image.type not in RESIZABLE_MIME_TYPES:
            logger.info(
                "Image type cannot be resized, storing original only",
                extra={"image_name": image.name, "content_type": image.type},
            )
            return {}

        return plan_derivatives(self._themes.get().config(THEME_IMAGE_SIZES_KEY))

    def _put(self, descriptor: UploadDescriptor) -> str:
        try:
            self._s3.put_object(descriptor)
        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": descriptor.key})
            raise ImageUploadFailedError(
                message="Unable to upload image at this time",
                details={"key": descriptor.key},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise ImageUploadFailedError(
                message="Unable to upload image at this time",
                details={"key": descriptor.key},
            ) from exc

        logger.debug(
            "Object uploaded",
            extra={"key": descriptor.key, "size": len(descriptor.body)},
        )
        return descriptor.key

    @staticmethod
    def _collect(
        futures: dict[Future[str], str],
    ) -> tuple[list[str], list[tuple[str, Exception]]]:
        uploaded: list[str] = []
        failures: list[tuple[str, Exception]] = []

        for future in as_completed(futures):
            try:
                uploaded.append(future.result())
            except Exception as exc:
                failures.append((futures[future], exc))

        return uploaded, failures

    def _remove_uploaded(self, keys: list[str]) -> None:
        # Best-effort; a failed cleanup must not mask the upload failure
        for key in keys:
            try:
                self._s3.delete_object(key=key)
            except Exception:
                logger.warning(
                    "Failed to clean up uploaded object after save failure",
                    extra={"key": key},
                )
