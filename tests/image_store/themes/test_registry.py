import json

import pytest

from image_store.themes.registry import StaticTheme, StaticThemeRegistry
from image_store.utils.constants import ENV_IMAGE_SIZES


class TestStaticThemeRegistry:
    def test_default_theme_has_no_sizes(self) -> None:
        assert StaticThemeRegistry().get().config("image_sizes") is None

    def test_activate_swaps_theme(self) -> None:
        registry = StaticThemeRegistry()
        theme = StaticTheme({"image_sizes": {"thumb": {"width": 10}}})

        registry.activate(theme)

        assert registry.get() is theme
        assert registry.get().config("image_sizes") == {"thumb": {"width": 10}}

    def test_from_env(self) -> None:
        sizes = {"thumb": {"width": 100}}

        registry = StaticThemeRegistry.from_env({ENV_IMAGE_SIZES: json.dumps(sizes)})

        assert registry.get().config("image_sizes") == sizes

    def test_from_env_without_sizes(self) -> None:
        assert StaticThemeRegistry.from_env({}).get().config("image_sizes") is None

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]"])
    def test_from_env_rejects_invalid_sizes(self, raw) -> None:
        with pytest.raises(ValueError):
            StaticThemeRegistry.from_env({ENV_IMAGE_SIZES: raw})
