"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
from typing import Any, Protocol

from image_store.infrastructure.aws.client_factory import S3ClientFactory
from image_store.models.image import UploadDescriptor


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (storage-facing)."""

    def put_object(self, descriptor: UploadDescriptor) -> None: ...

    def get_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Obtains a fresh boto3 client from the factory for every call
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, *, bucket: str, factory: S3ClientFactory) -> None:
        self._bucket = bucket
        self._factory = factory

    def put_object(self, descriptor: UploadDescriptor) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._factory.create().put_object(**descriptor.to_params())

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object from S3. The body is a botocore ``StreamingBody``.
        Raises boto3 exceptions - caught by domain implementation.
        """
        response: Mapping[str, Any] = self._factory.create().get_object(
            Bucket=self._bucket,
            Key=key,
        )
        return response

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._factory.create().delete_object(
            Bucket=self._bucket,
            Key=key,
        )
