"""Construction of configured S3 clients and credential resolution."""

from dataclasses import dataclass
from typing import Any, Protocol

import boto3
from botocore.config import Config

from image_store.models.configuration import StorageConfiguration
from image_store.utils.constants import SIGNATURE_VERSION_MAP


@dataclass(frozen=True)
class StaticCredentials:
    """An explicit access key / secret pair."""

    access_key_id: str
    secret_access_key: str


class CredentialProvider(Protocol):
    """Supplies explicit credentials, or ``None`` to use the ambient chain."""

    def resolve(self) -> StaticCredentials | None: ...


class AmbientCredentialProvider:
    """Defers to boto3's default chain (env vars, shared files, IAM role)."""

    def resolve(self) -> StaticCredentials | None:
        return None


class StaticCredentialProvider:
    """Credentials taken from configuration; only usable when both are set."""

    def __init__(self, access_key_id: str | None, secret_access_key: str | None) -> None:
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key

    def resolve(self) -> StaticCredentials | None:
        if self._access_key_id and self._secret_access_key:
            return StaticCredentials(self._access_key_id, self._secret_access_key)
        return None


def default_credential_provider(config: StorageConfiguration) -> CredentialProvider:
    """Static credentials when configured, otherwise the ambient chain."""
    if config.access_key_id and config.secret_access_key:
        return StaticCredentialProvider(config.access_key_id, config.secret_access_key)
    return AmbientCredentialProvider()


class S3ClientFactory:
    """Builds a new S3 client for every operation.

    Each client comes from its own boto3 session, so clients can be created
    from worker threads without sharing the default session.
    """

    def __init__(
        self,
        config: StorageConfiguration,
        credential_provider: CredentialProvider | None = None,
    ) -> None:
        self._config = config
        self._credentials = credential_provider or default_credential_provider(config)

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments passed to ``Session.client("s3", ...)``."""
        s3_options: dict[str, Any] = {}
        if self._config.force_path_style:
            s3_options["addressing_style"] = "path"

        options: dict[str, Any] = {
            "region_name": self._config.region,
            "config": Config(
                signature_version=SIGNATURE_VERSION_MAP.get(
                    self._config.signature_version, self._config.signature_version
                ),
                s3=s3_options,
            ),
        }

        credentials = self._credentials.resolve()
        if credentials is not None:
            options["aws_access_key_id"] = credentials.access_key_id
            options["aws_secret_access_key"] = credentials.secret_access_key

        if self._config.endpoint:
            options["endpoint_url"] = self._config.endpoint

        return options

    def create(self) -> Any:
        """Return a freshly configured boto3 S3 client."""
        session = boto3.session.Session()
        return session.client("s3", **self.client_options())
