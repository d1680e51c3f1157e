from pathlib import Path
from typing import Any

import pytest

from handlers.upload_image.service import UploadService
from image_store.models.errors import MIMETypeError, ValidationError
from image_store.models.image import UploadRequest


class RecordingStorage:
    def __init__(self) -> None:
        self.calls: list[tuple[UploadRequest, str | None]] = []
        self.seen_bytes: bytes | None = None

    def save(self, image: UploadRequest, target_dir: str | None = None) -> str:
        self.calls.append((image, target_dir))
        self.seen_bytes = Path(image.path).read_bytes()
        return f"https://cdn.example/{image.name}"


class FailingStorage:
    def __init__(self) -> None:
        self.path: str | None = None

    def save(self, image: UploadRequest, target_dir: Any = None) -> str:
        self.path = image.path
        raise RuntimeError("boom")


class TestUploadService:
    def test_decode_file(self) -> None:
        assert UploadService.decode_file("aGVsbG8=") == b"hello"

    def test_decode_invalid_file(self) -> None:
        with pytest.raises(ValidationError):
            UploadService.decode_file("not base64!")

    def test_upload_saves_temp_file(self, sample_image_binary) -> None:
        storage = RecordingStorage()

        url = UploadService(storage).upload_image(  # type: ignore[arg-type]
            file_name="photo.png",
            file_data=sample_image_binary,
            target_dir="uploads",
        )

        image, target_dir = storage.calls[0]
        assert url == "https://cdn.example/photo.png"
        assert image.name == "photo.png"
        assert image.type == "image/png"
        assert target_dir == "uploads"
        assert storage.seen_bytes == sample_image_binary
        assert not Path(image.path).exists()

    def test_declared_content_type_wins(self, sample_image_binary) -> None:
        storage = RecordingStorage()

        UploadService(storage).upload_image(  # type: ignore[arg-type]
            file_name="photo.png",
            file_data=sample_image_binary,
            content_type="image/webp",
        )

        assert storage.calls[0][0].type == "image/webp"

    def test_unsupported_type(self) -> None:
        storage = RecordingStorage()

        with pytest.raises(MIMETypeError):
            UploadService(storage).upload_image(  # type: ignore[arg-type]
                file_name="a.png",
                file_data=b"text",
            )

        assert storage.calls == []

    def test_temp_file_removed_on_failure(self, sample_image_binary) -> None:
        storage = FailingStorage()

        with pytest.raises(RuntimeError):
            UploadService(storage).upload_image(  # type: ignore[arg-type]
                file_name="photo.png",
                file_data=sample_image_binary,
            )

        assert storage.path is not None
        assert not Path(storage.path).exists()
