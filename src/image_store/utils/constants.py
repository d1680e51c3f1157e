"""Global constants used throughout the application.

This module centralizes error codes, storage defaults and the names of the
environment variables that override the storage configuration.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Storage Errors
ERROR_CODE_S3 = "S3_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DOWNLOAD_FAILED = "IMAGE_DOWNLOAD_FAILED"
ERROR_CODE_SOURCE_READ_FAILED = "SOURCE_READ_FAILED"

# Processing Errors
ERROR_CODE_IMAGE_TRANSFORM_FAILED = "IMAGE_TRANSFORM_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes


MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
    "image/svg+xml": ("svg",),
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())

# Types Pillow can decode; others are stored without derivatives
RESIZABLE_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp"}
)

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset(
    ext for extensions in MIME_TYPE_EXTENSION_MAP.values() for ext in extensions
)

DEFAULT_BINARY_CONTENT_TYPE = "application/octet-stream"


# ============================================================================
# Storage Layout
# ============================================================================

ORIGINAL_DIR = "original"
DERIVATIVE_DIR = "size"
THEME_IMAGE_SIZES_KEY = "image_sizes"

CACHE_MAX_AGE_SECONDS = 30 * 24 * 60 * 60  # 30 days
CACHE_CONTROL = f"max-age={CACHE_MAX_AGE_SECONDS}"

# ============================================================================
# Storage Defaults
# ============================================================================

DEFAULT_REGION = "us-east-1"
DEFAULT_SIGNATURE_VERSION = "v4"
DEFAULT_ACL = "public-read"
DEFAULT_LOCAL_STORAGE_PATH = "content/images"

# Region whose public S3 host carries no region suffix
LEGACY_GLOBAL_REGION = "us-east-1"

SIGNATURE_VERSION_MAP: Final[dict[str, str]] = {
    "v4": "s3v4",
    "v2": "s3",
}

TRUTHY_ENV_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length,ETag,Last-Modified"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_DEFAULT_REGION = "AWS_DEFAULT_REGION"
ENV_S3_BUCKET = "GHOST_STORAGE_ADAPTER_S3_PATH_BUCKET"
ENV_S3_ASSET_HOST = "GHOST_STORAGE_ADAPTER_S3_ASSET_HOST"
ENV_S3_PATH_PREFIX = "GHOST_STORAGE_ADAPTER_S3_PATH_PREFIX"
ENV_S3_ENDPOINT = "GHOST_STORAGE_ADAPTER_S3_ENDPOINT"
ENV_S3_SSE = "GHOST_STORAGE_ADAPTER_S3_SSE"
ENV_S3_FORCE_PATH_STYLE = "GHOST_STORAGE_ADAPTER_S3_FORCE_PATH_STYLE"
ENV_S3_SIGNATURE_VERSION = "GHOST_STORAGE_ADAPTER_S3_SIGNATURE_VERSION"
ENV_S3_ACL = "GHOST_STORAGE_ADAPTER_S3_ACL"
ENV_S3_CLEANUP_ON_FAILURE = "GHOST_STORAGE_ADAPTER_S3_CLEANUP_ON_FAILURE"

ENV_LOCAL_STORAGE_PATH = "IMAGE_STORAGE_LOCAL_PATH"
ENV_IMAGE_SIZES = "IMAGE_STORAGE_IMAGE_SIZES"

STORAGE_ENV_VARS: Final[tuple[str, ...]] = (
    ENV_AWS_DEFAULT_REGION,
    ENV_S3_BUCKET,
    ENV_S3_ASSET_HOST,
    ENV_S3_PATH_PREFIX,
    ENV_S3_ENDPOINT,
    ENV_S3_SSE,
    ENV_S3_FORCE_PATH_STYLE,
    ENV_S3_SIGNATURE_VERSION,
    ENV_S3_ACL,
    ENV_S3_CLEANUP_ON_FAILURE,
)


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)
