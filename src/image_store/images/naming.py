"""Collision-free naming of stored files."""

from collections.abc import Callable, Sequence
import posixpath
import re

from image_store.models.image import UploadRequest
from image_store.utils.time import utc_now

ExistsCheck = Callable[[str, str], bool]

_UNSAFE_CHARACTERS = re.compile(r"[^\w@.]")


def sanitize_file_name(name: str) -> str:
    """Replace anything but word characters, ``@`` and ``.`` with ``-``."""
    return _UNSAFE_CHARACTERS.sub("-", name)


class StorageNaming:
    """Dated target directories and unique file names.

    Uniqueness is checked with the ``exists(file_name, directory)`` callable of
    whichever storage owns the namespace.
    """

    def __init__(self, exists: ExistsCheck) -> None:
        self._exists = exists

    def get_target_dir(self, base_dir: str = "") -> str:
        """``<base_dir>/YYYY/MM`` for the current UTC month."""
        now = utc_now()
        year, month = now.strftime("%Y"), now.strftime("%m")

        if base_dir:
            return posixpath.join(base_dir, year, month)
        return posixpath.join(year, month)

    def get_unique_base_name(self, image: UploadRequest, target_dirs: Sequence[str]) -> str:
        """Return ``<name>[-N]<ext>`` that is free in every one of ``target_dirs``."""
        stem, ext = posixpath.splitext(posixpath.basename(image.name))
        stem = sanitize_file_name(stem)

        attempt = 0
        file_name = f"{stem}{ext}"

        while any(self._exists(file_name, directory) for directory in target_dirs):
            attempt += 1
            file_name = f"{stem}-{attempt}{ext}"

        return file_name

    def get_unique_file_name(self, image: UploadRequest, target_dir: str) -> str:
        """Return ``<target_dir>/<name>[-N]<ext>`` not yet present in storage."""
        return posixpath.join(target_dir, self.get_unique_base_name(image, [target_dir]))
