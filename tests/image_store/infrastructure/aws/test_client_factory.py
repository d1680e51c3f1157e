from image_store.infrastructure.aws.client_factory import (
    AmbientCredentialProvider,
    S3ClientFactory,
    StaticCredentialProvider,
    StaticCredentials,
    default_credential_provider,
)
from image_store.models.configuration import StorageConfiguration


def _config(**options) -> StorageConfiguration:
    return StorageConfiguration.resolve(options, environ={})


class TestCredentialProviders:
    def test_static_credentials_when_both_set(self) -> None:
        provider = default_credential_provider(
            _config(accessKeyId="AKIA", secretAccessKey="secret")
        )

        assert provider.resolve() == StaticCredentials("AKIA", "secret")

    def test_ambient_chain_when_incomplete(self) -> None:
        provider = default_credential_provider(_config(accessKeyId="AKIA"))

        assert isinstance(provider, AmbientCredentialProvider)
        assert provider.resolve() is None

    def test_static_provider_requires_both_values(self) -> None:
        assert StaticCredentialProvider("AKIA", None).resolve() is None


class TestS3ClientFactoryOptions:
    def test_defaults(self) -> None:
        options = S3ClientFactory(_config()).client_options()

        assert options["region_name"] == "us-east-1"
        assert options["config"].signature_version == "s3v4"
        assert options["config"].s3 == {}
        assert "endpoint_url" not in options
        assert "aws_access_key_id" not in options

    def test_static_credentials_are_passed(self) -> None:
        options = S3ClientFactory(
            _config(accessKeyId="AKIA", secretAccessKey="secret")
        ).client_options()

        assert options["aws_access_key_id"] == "AKIA"
        assert options["aws_secret_access_key"] == "secret"

    def test_endpoint_and_path_style(self) -> None:
        options = S3ClientFactory(
            _config(endpoint="http://localhost:9000", forcePathStyle=True)
        ).client_options()

        assert options["endpoint_url"] == "http://localhost:9000"
        assert options["config"].s3 == {"addressing_style": "path"}

    def test_legacy_signature_version(self) -> None:
        options = S3ClientFactory(_config(signatureVersion="v2")).client_options()

        assert options["config"].signature_version == "s3"

    def test_custom_credential_provider(self) -> None:
        class Provider:
            def resolve(self) -> StaticCredentials:
                return StaticCredentials("from-provider", "secret")

        options = S3ClientFactory(_config(), credential_provider=Provider()).client_options()

        assert options["aws_access_key_id"] == "from-provider"


class TestS3ClientFactoryCreate:
    def test_creates_configured_client(self) -> None:
        client = S3ClientFactory(
            _config(region="eu-west-1", endpoint="http://localhost:9000")
        ).create()

        assert client.meta.region_name == "eu-west-1"
        assert client.meta.endpoint_url == "http://localhost:9000"

    def test_new_client_per_call(self) -> None:
        factory = S3ClientFactory(_config())

        assert factory.create() is not factory.create()
