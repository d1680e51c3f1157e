from datetime import datetime, timezone

import pytest

from image_store.images import naming
from image_store.images.naming import StorageNaming, sanitize_file_name
from image_store.models.image import UploadRequest


@pytest.fixture
def fixed_now(monkeypatch):
    monkeypatch.setattr(
        naming,
        "utc_now",
        lambda: datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc),
    )


def _request(name: str = "photo.png") -> UploadRequest:
    return UploadRequest(path="/tmp/upload", name=name, type="image/png")


class TestTargetDir:
    def test_dated_directory(self, fixed_now) -> None:
        assert StorageNaming(lambda *_: False).get_target_dir() == "2024/03"

    def test_dated_directory_below_base(self, fixed_now) -> None:
        assert StorageNaming(lambda *_: False).get_target_dir("blog") == "blog/2024/03"


class TestUniqueFileName:
    def test_free_name_is_used_as_is(self) -> None:
        result = StorageNaming(lambda *_: False).get_unique_file_name(_request(), "2024/03")

        assert result == "2024/03/photo.png"

    def test_taken_names_get_numeric_suffix(self) -> None:
        taken = {("photo.png", "dir"), ("photo-1.png", "dir")}
        storage_naming = StorageNaming(lambda name, directory: (name, directory) in taken)

        assert storage_naming.get_unique_file_name(_request(), "dir") == "dir/photo-2.png"

    def test_exists_receives_name_and_directory(self) -> None:
        calls: list[tuple[str, str]] = []

        def exists(name: str, directory: str) -> bool:
            calls.append((name, directory))
            return False

        StorageNaming(exists).get_unique_file_name(_request(), "a/original")

        assert calls == [("photo.png", "a/original")]

    def test_name_is_sanitized(self) -> None:
        result = StorageNaming(lambda *_: False).get_unique_file_name(
            _request("my holiday (1).png"), "d"
        )

        assert result == "d/my-holiday--1-.png"


class TestUniqueBaseName:
    def test_name_must_be_free_in_every_directory(self) -> None:
        taken = {("photo.png", "d/size/w100")}
        storage_naming = StorageNaming(lambda name, directory: (name, directory) in taken)

        result = storage_naming.get_unique_base_name(
            _request(), ["d/original", "d/size/w100", "d/size/h50"]
        )

        assert result == "photo-1.png"

    def test_suffix_skips_names_taken_in_any_directory(self) -> None:
        taken = {("photo.png", "d/original"), ("photo-1.png", "d/size/h50")}
        storage_naming = StorageNaming(lambda name, directory: (name, directory) in taken)

        result = storage_naming.get_unique_base_name(
            _request(), ["d/original", "d/size/w100", "d/size/h50"]
        )

        assert result == "photo-2.png"

    def test_free_name_is_returned_without_directory(self) -> None:
        result = StorageNaming(lambda *_: False).get_unique_base_name(_request(), ["d/original"])

        assert result == "photo.png"


class TestSanitizeFileName:
    def test_keeps_word_characters_at_and_dot(self) -> None:
        assert sanitize_file_name("logo@2x.final") == "logo@2x.final"

    def test_replaces_unsafe_characters(self) -> None:
        assert sanitize_file_name("a b/c?d") == "a-b-c-d"
