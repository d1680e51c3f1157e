import base64
import json
from types import SimpleNamespace
from typing import Any

import pytest

from image_store.utils.constants import (
    ENV_AWS_DEFAULT_REGION,
    ENV_IMAGE_SIZES,
    ENV_LOCAL_STORAGE_PATH,
    ENV_S3_BUCKET,
)


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def storage_env(monkeypatch, s3_bucket, local_root):
    """Point the handlers' storage at the mocked bucket and a temp local root."""
    monkeypatch.setenv(ENV_AWS_DEFAULT_REGION, "us-east-1")
    monkeypatch.setenv(ENV_S3_BUCKET, "test-images")
    monkeypatch.setenv(ENV_LOCAL_STORAGE_PATH, str(local_root))
    monkeypatch.setenv(ENV_IMAGE_SIZES, json.dumps({"thumb": {"width": 50}}))
    return local_root


@pytest.fixture
def upload_image_event(sample_image_binary) -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/v1/images",
        "body": json.dumps(
            {
                "file": base64.b64encode(sample_image_binary).decode("utf-8"),
                "file_name": "photo.png",
                "target_dir": "uploads",
            }
        ),
        "headers": {"Content-Type": "application/json"},
    }


@pytest.fixture
def delete_image_event() -> dict[str, Any]:
    return {
        "httpMethod": "DELETE",
        "pathParameters": {"file_name": "photo.png"},
        "queryStringParameters": {"target_dir": "uploads"},
    }
