"""Tests for pdf2bitmap.config: RenderConfig defaults, overrides, and validation."""

import tempfile
from pathlib import Path

import pytest

from pdf2bitmap.config import ConfigValidationError, RenderConfig


class TestRenderConfig:
    def test_defaults(self):
        cfg = RenderConfig()
        assert cfg.default_dpi == 300
        assert cfg.default_scale == 2.0
        assert cfg.default_page_index == 0
        assert cfg.plain_surface_width == 300
        assert cfg.plain_surface_height == 300
        assert cfg.draw_annotations is True
        assert cfg.cache_dir is None

    def test_override(self):
        cfg = RenderConfig(default_scale=1.5, png_compress_level=9)
        assert cfg.default_scale == 1.5
        assert cfg.png_compress_level == 9

    def test_vars_round_trip(self):
        cfg = RenderConfig(default_dpi=150, draw_annotations=False)
        cfg2 = RenderConfig(**vars(cfg))
        assert vars(cfg) == vars(cfg2)

    def test_default_cache_dir_under_tmp(self):
        cfg = RenderConfig()
        assert cfg.resolved_cache_dir == Path(tempfile.gettempdir()) / "pdf2bitmap"

    def test_cache_dir_str_coerced(self, tmp_path):
        cfg = RenderConfig(cache_dir=str(tmp_path))
        assert cfg.cache_dir == tmp_path
        assert cfg.resolved_cache_dir == tmp_path


class TestConfigValidation:
    @pytest.mark.parametrize(
        "field_name",
        [
            "default_dpi",
            "default_scale",
            "plain_surface_width",
            "plain_surface_height",
            "max_surface_pixels",
        ],
    )
    def test_positive_fields_reject_zero(self, field_name):
        with pytest.raises(ConfigValidationError, match=field_name):
            RenderConfig(**{field_name: 0})

    def test_nan_scale_rejected(self):
        with pytest.raises(ConfigValidationError, match="default_scale"):
            RenderConfig(default_scale=float("nan"))

    def test_negative_page_index_rejected(self):
        with pytest.raises(ConfigValidationError, match="default_page_index"):
            RenderConfig(default_page_index=-1)

    def test_compress_level_range(self):
        with pytest.raises(ConfigValidationError, match="png_compress_level"):
            RenderConfig(png_compress_level=10)
        assert RenderConfig(png_compress_level=0).png_compress_level == 0

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            RenderConfig(default_scale=-2.0)
