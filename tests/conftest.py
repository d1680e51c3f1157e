"""
Pytest configuration and fixtures for image-store tests.
Provides AWS mocking, S3 fixtures with proper cleanup and sample images.
"""

import io
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from image_store.utils.constants import (
    ENV_IMAGE_SIZES,
    ENV_LOCAL_STORAGE_PATH,
    STORAGE_ENV_VARS,
)

# Set before any handler module creates its Tracer / Metrics
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-store")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageStore")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")

TEST_REGION = "us-east-1"
TEST_BUCKET = "test-images"


@pytest.fixture(autouse=True)
def clean_storage_env(monkeypatch):
    """Every test starts without storage overrides in the environment."""
    for name in (*STORAGE_ENV_VARS, ENV_IMAGE_SIZES, ENV_LOCAL_STORAGE_PATH):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=TEST_REGION)


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    try:
        s3_client.head_bucket(Bucket=TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=TEST_BUCKET)

    yield s3_client

    _cleanup_s3_objects(s3_client, TEST_BUCKET)


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("2024/01/original/img.png", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        response: dict[str, Any] = s3_bucket.put_object(
            Bucket=TEST_BUCKET, Key=key, Body=body, ContentType=content_type
        )
        return response

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], bytes]:
    """Helper to read an object's bytes back from S3."""

    def _get(key: str) -> bytes:
        response = s3_bucket.get_object(Bucket=TEST_BUCKET, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_keys(s3_bucket) -> Callable[[], set[str]]:
    """Helper returning every key currently stored in the test bucket."""

    def _keys() -> set[str]:
        response = s3_bucket.list_objects_v2(Bucket=TEST_BUCKET)
        return {obj["Key"] for obj in response.get("Contents", [])}

    return _keys


def make_image_bytes(
    size: tuple[int, int] = (400, 300),
    image_format: str = "PNG",
) -> bytes:
    """Encode a solid-colour image of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 80, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def sample_image_binary() -> bytes:
    """A real 400x300 PNG."""
    return make_image_bytes()


@pytest.fixture
def sample_image_file(tmp_path, sample_image_binary) -> Path:
    """The sample PNG written to a temporary upload file."""
    path = tmp_path / "upload.tmp"
    path.write_bytes(sample_image_binary)
    return path


@pytest.fixture
def local_root(tmp_path) -> Path:
    """Root directory of the local fallback storage."""
    root = tmp_path / "local"
    root.mkdir()
    return root


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """Usage: ``image_factory((800, 600), "JPEG")``."""
    return make_image_bytes
