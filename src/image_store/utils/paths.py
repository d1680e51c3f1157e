"""Helpers for normalising object keys and request paths."""

import re

_TRAILING_SEPARATOR = re.compile(r"/\Z|\\\Z")


def strip_leading_slash(value: str) -> str:
    """Remove a single leading ``/`` so the value is usable as an object key."""
    return value[1:] if value.startswith("/") else value


def strip_trailing_slash(value: str) -> str:
    """Remove a single trailing ``/``."""
    return value[:-1] if value.endswith("/") else value


def strip_trailing_separator(value: str) -> str:
    """Remove a single trailing ``/`` or ``\\`` from a requested path."""
    return _TRAILING_SEPARATOR.sub("", value, count=1)
