"""Assembles an S3ImageStorage from the process environment."""

from collections.abc import Mapping
import os

from image_store.infrastructure.aws.s3_image_storage import S3ImageStorage
from image_store.infrastructure.local.local_file_storage import LocalFileStorage
from image_store.models.configuration import StorageConfiguration, StorageOptions
from image_store.themes.registry import StaticThemeRegistry
from image_store.utils.constants import DEFAULT_LOCAL_STORAGE_PATH, ENV_LOCAL_STORAGE_PATH


def build_storage(
    options: StorageOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> S3ImageStorage:
    """Create the storage used by the Lambda handlers."""
    env = os.environ if environ is None else environ

    return S3ImageStorage(
        StorageConfiguration.resolve(options, environ=env),
        local=LocalFileStorage(env.get(ENV_LOCAL_STORAGE_PATH) or DEFAULT_LOCAL_STORAGE_PATH),
        themes=StaticThemeRegistry.from_env(env),
    )
