import json

from image_store.infrastructure.bootstrap import build_storage
from image_store.models.configuration import StorageOptions
from image_store.utils.constants import (
    ENV_IMAGE_SIZES,
    ENV_LOCAL_STORAGE_PATH,
    ENV_S3_BUCKET,
)


class TestBuildStorage:
    def test_configuration_from_environment(self, tmp_path) -> None:
        storage = build_storage(
            environ={
                ENV_S3_BUCKET: "env-bucket",
                ENV_LOCAL_STORAGE_PATH: str(tmp_path),
                ENV_IMAGE_SIZES: json.dumps({"thumb": {"width": 10}}),
            }
        )

        assert storage.config.bucket == "env-bucket"
        assert storage.config.host == "https://s3.amazonaws.com/env-bucket"
        assert storage._local.storage_path == tmp_path
        assert storage._themes.get().config("image_sizes") == {"thumb": {"width": 10}}

    def test_options_apply_without_environment(self) -> None:
        storage = build_storage(StorageOptions(bucket="opt-bucket", region="eu-west-1"), environ={})

        assert storage.config.host == "https://s3-eu-west-1.amazonaws.com/opt-bucket"
        assert str(storage._local.storage_path) == "content/images"
