"""Storage configuration models and their resolution from the environment."""

from collections.abc import Mapping
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from image_store.utils.constants import (
    DEFAULT_ACL,
    DEFAULT_REGION,
    DEFAULT_SIGNATURE_VERSION,
    ENV_AWS_DEFAULT_REGION,
    ENV_S3_ACL,
    ENV_S3_ASSET_HOST,
    ENV_S3_BUCKET,
    ENV_S3_CLEANUP_ON_FAILURE,
    ENV_S3_ENDPOINT,
    ENV_S3_FORCE_PATH_STYLE,
    ENV_S3_PATH_PREFIX,
    ENV_S3_SIGNATURE_VERSION,
    ENV_S3_SSE,
    LEGACY_GLOBAL_REGION,
    TRUTHY_ENV_VALUES,
)
from image_store.utils.paths import strip_leading_slash


class StorageOptions(BaseModel):
    """Constructor-supplied storage options.

    Accepts both snake_case field names and the camelCase keys used by
    storage adapter config files (``accessKeyId``, ``assetHost``, ...).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    access_key_id: str | None = Field(None, alias="accessKeyId")
    secret_access_key: str | None = Field(None, alias="secretAccessKey")
    region: str | None = None
    bucket: str | None = None
    asset_host: str | None = Field(None, alias="assetHost")
    path_prefix: str | None = Field(None, alias="pathPrefix")
    endpoint: str | None = None
    server_side_encryption: str | None = Field(None, alias="serverSideEncryption")
    force_path_style: bool | None = Field(None, alias="forcePathStyle")
    signature_version: str | None = Field(None, alias="signatureVersion")
    acl: str | None = None
    cleanup_on_failure: bool | None = Field(None, alias="cleanupOnFailure")


class StorageConfiguration(BaseModel):
    """Fully resolved, immutable storage configuration."""

    model_config = ConfigDict(frozen=True)

    access_key_id: StrictStr | None = Field(None, description="Explicit access key")
    secret_access_key: StrictStr | None = Field(None, description="Explicit secret key")
    region: StrictStr = Field(..., description="Object store region")
    bucket: StrictStr = Field(..., description="Bucket holding the images")
    host: StrictStr = Field(..., description="Public base URL of stored objects")
    path_prefix: StrictStr = Field("", description="Key prefix, no leading slash")
    endpoint: StrictStr = Field("", description="Endpoint override, empty for AWS")
    server_side_encryption: StrictStr = Field("", description="SSE mode, empty for none")
    force_path_style: StrictBool = Field(False, description="Use path-style addressing")
    signature_version: StrictStr = Field(DEFAULT_SIGNATURE_VERSION)
    acl: StrictStr = Field(DEFAULT_ACL, description="Canned ACL applied to uploads")
    cleanup_on_failure: StrictBool = Field(
        False,
        description="Delete already uploaded siblings when a save fails",
    )

    @classmethod
    def resolve(
        cls,
        options: StorageOptions | Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "StorageConfiguration":
        """Resolve every field as environment > constructor value > default.

        No network or disk I/O happens here and a missing bucket or region is
        accepted; it only surfaces once the store is called.
        """
        if options is None:
            options = StorageOptions()
        elif not isinstance(options, StorageOptions):
            options = StorageOptions.model_validate(dict(options))

        env = os.environ if environ is None else environ

        region = _first(env.get(ENV_AWS_DEFAULT_REGION), options.region) or DEFAULT_REGION
        bucket = _first(env.get(ENV_S3_BUCKET), options.bucket) or ""
        host = _first(env.get(ENV_S3_ASSET_HOST), options.asset_host) or default_host(
            region, bucket
        )

        return cls(
            access_key_id=options.access_key_id or None,
            secret_access_key=options.secret_access_key or None,
            region=region,
            bucket=bucket,
            host=host,
            path_prefix=strip_leading_slash(
                _first(env.get(ENV_S3_PATH_PREFIX), options.path_prefix) or ""
            ),
            endpoint=_first(env.get(ENV_S3_ENDPOINT), options.endpoint) or "",
            server_side_encryption=_first(env.get(ENV_S3_SSE), options.server_side_encryption)
            or "",
            force_path_style=_flag(env.get(ENV_S3_FORCE_PATH_STYLE), options.force_path_style),
            signature_version=_first(
                env.get(ENV_S3_SIGNATURE_VERSION), options.signature_version
            )
            or DEFAULT_SIGNATURE_VERSION,
            acl=_first(env.get(ENV_S3_ACL), options.acl) or DEFAULT_ACL,
            cleanup_on_failure=_flag(
                env.get(ENV_S3_CLEANUP_ON_FAILURE), options.cleanup_on_failure
            ),
        )


def default_host(region: str, bucket: str) -> str:
    """Public S3 URL for a bucket; ``us-east-1`` has no region suffix."""
    suffix = "" if region == LEGACY_GLOBAL_REGION else f"-{region}"
    return f"https://s3{suffix}.amazonaws.com/{bucket}"


def _first(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def _flag(env_value: str | None, option: bool | None) -> bool:
    if env_value:
        return env_value.strip().lower() in TRUTHY_ENV_VALUES
    return bool(option)
