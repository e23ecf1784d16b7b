import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ConfigValidationError(ValueError):
    """Raised when a RenderConfig field has an invalid value."""


def _check_range(name: str, value: float, lo: float, hi: float) -> None:
    if not (lo <= value <= hi):
        raise ConfigValidationError(f"{name}={value} out of range [{lo}, {hi}]")


def _check_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ConfigValidationError(f"{name}={value} must be > 0")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigValidationError(f"{name}={value} must be >= 0")


@dataclass
class RenderConfig:
    """Tunables for page rasterization and output."""

    # Defaults applied when a request omits the argument.
    default_dpi: int = 300
    default_scale: float = 2.0
    default_page_index: int = 0
    # Size of the diagnostic plain surface (no PDF involved).
    plain_surface_width: int = 300
    plain_surface_height: int = 300
    # Where synthesized output paths land; None means <tmp>/pdf2bitmap.
    cache_dir: Optional[Path] = None
    # zlib level for PNG output (lossless at every level).
    png_compress_level: int = 6
    # Display-quality rendering draws annotations.
    draw_annotations: bool = True
    # Upper bound on width*height of one surface (RGBA8 = 4 bytes each).
    max_surface_pixels: int = 100_000_000

    def __post_init__(self) -> None:
        _check_positive("default_dpi", self.default_dpi)
        _check_positive("default_scale", self.default_scale)
        _check_non_negative("default_page_index", self.default_page_index)
        _check_positive("plain_surface_width", self.plain_surface_width)
        _check_positive("plain_surface_height", self.plain_surface_height)
        _check_range("png_compress_level", self.png_compress_level, 0, 9)
        _check_positive("max_surface_pixels", self.max_surface_pixels)
        if self.cache_dir is not None:
            self.cache_dir = Path(self.cache_dir)

    @property
    def resolved_cache_dir(self) -> Path:
        """Directory for synthesized output files."""
        if self.cache_dir is not None:
            return self.cache_dir
        return Path(tempfile.gettempdir()) / "pdf2bitmap"
