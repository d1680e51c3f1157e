"""Access to the active theme's settings."""

from collections.abc import Mapping
import json
import os
from typing import Any, Protocol

from aws_lambda_powertools import Logger

from image_store.utils.constants import ENV_IMAGE_SIZES, THEME_IMAGE_SIZES_KEY

logger = Logger(UTC=True)


class Theme(Protocol):
    def config(self, key: str) -> Any: ...


class ThemeRegistry(Protocol):
    """Returns the theme that is active at call time."""

    def get(self) -> Theme: ...


class StaticTheme:
    """A theme whose settings are a plain mapping."""

    def __init__(self, settings: Mapping[str, Any] | None = None) -> None:
        self._settings = dict(settings or {})

    def config(self, key: str) -> Any:
        return self._settings.get(key)


class StaticThemeRegistry:
    """In-process registry; ``activate`` swaps the theme for later saves."""

    def __init__(self, theme: Theme | None = None) -> None:
        self._theme: Theme = theme or StaticTheme()

    def get(self) -> Theme:
        return self._theme

    def activate(self, theme: Theme) -> None:
        self._theme = theme

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StaticThemeRegistry":
        """Build a registry whose theme's ``image_sizes`` come from JSON in the env."""
        env = os.environ if environ is None else environ
        raw = env.get(ENV_IMAGE_SIZES)

        if not raw:
            return cls()

        try:
            image_sizes = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error(
                "Invalid image sizes JSON",
                extra={"env_var": ENV_IMAGE_SIZES},
            )
            raise ValueError(f"{ENV_IMAGE_SIZES} must contain a JSON object") from exc

        if not isinstance(image_sizes, dict):
            raise ValueError(f"{ENV_IMAGE_SIZES} must contain a JSON object")

        return cls(StaticTheme({THEME_IMAGE_SIZES_KEY: image_sizes}))
