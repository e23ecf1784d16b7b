"""Page surface builder: pixel dimensions, transform, and the white canvas.

Dimensions are truncated, not rounded: ``int(points * scale)``.  A
surface is always filled with opaque white before anything is drawn on
it, so transparent page regions come out white and no uninitialised
memory reaches the encoder.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import pypdfium2 as pdfium
import pypdfium2.raw as pdfium_c
from PIL import Image

from ..config import RenderConfig
from ..errors import InvalidArgumentError, InvalidDimensionsError

log = logging.getLogger(__name__)

OPAQUE_WHITE = 0xFFFFFFFF  # 0xAARRGGBB
WHITE_RGBA = (255, 255, 255, 255)


def compute_dimensions(width: float, height: float, scale: float) -> Tuple[int, int]:
    """Pixel size of a ``width`` x ``height`` point page at *scale*."""
    if not math.isfinite(scale) or scale <= 0:
        raise InvalidArgumentError(f"scaleFactor must be a finite number > 0, got {scale!r}")
    return int(width * scale), int(height * scale)


def check_dimensions(width: int, height: int, cfg: Optional[RenderConfig] = None) -> None:
    """Raise :class:`InvalidDimensionsError` for sizes that cannot be allocated."""
    if cfg is None:
        cfg = RenderConfig()
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"Surface must be at least 1x1 pixels, got {width}x{height}",
            {"width": width, "height": height},
        )
    if width * height > cfg.max_surface_pixels:
        raise InvalidDimensionsError(
            f"Surface {width}x{height} exceeds {cfg.max_surface_pixels} pixels",
            {"width": width, "height": height},
        )


@dataclass(frozen=True)
class PageTransform:
    """Affine map ``(x, y) -> (a*x + c*y + e, b*x + d*y + f)``.

    Page space here is PDFium's top-left origin, y-down point space.
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def scaling(cls, scale: float) -> "PageTransform":
        return cls(a=scale, d=scale)

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def to_raw(self) -> Any:
        """Return a ``FS_MATRIX`` for PDFium."""
        return pdfium_c.FS_MATRIX(self.a, self.b, self.c, self.d, self.e, self.f)


class RasterSurface:
    """A ``width`` x ``height`` RGBA8 bitmap owned by one request.

    :meth:`close` releases the pixel buffer exactly once; later calls
    are no-ops.
    """

    def __init__(self, bitmap: Any, width: int, height: int) -> None:
        self.bitmap = bitmap
        self.width = width
        self.height = height
        self.released = False

    @property
    def raw(self) -> Any:
        """The underlying ``FPDF_BITMAP`` handle."""
        if self.released:
            raise RuntimeError("Surface has been released")
        return self.bitmap.raw

    @classmethod
    def allocate(cls, width: int, height: int, cfg: Optional[RenderConfig] = None) -> "RasterSurface":
        """Allocate a surface and fill it with opaque white."""
        check_dimensions(width, height, cfg)
        try:
            bitmap = pdfium.PdfBitmap.new_native(
                width, height, pdfium_c.FPDFBitmap_BGRA, rev_byteorder=True
            )
        except (pdfium.PdfiumError, MemoryError) as exc:
            raise InvalidDimensionsError(
                f"Cannot allocate {width}x{height} surface: {exc}",
                {"width": width, "height": height},
            ) from exc
        surface = cls(bitmap, width, height)
        try:
            # Older PDFium builds return void (None); newer ones an FPDF_BOOL.
            ok = pdfium_c.FPDFBitmap_FillRect(bitmap.raw, 0, 0, width, height, OPAQUE_WHITE)
            if ok is not None and not ok:
                raise InvalidDimensionsError(
                    f"Cannot fill {width}x{height} surface",
                    {"width": width, "height": height},
                )
        except BaseException:
            surface.close()
            raise
        return surface

    def to_image(self) -> Image.Image:
        """Return the pixels as a Pillow ``RGBA`` image (independent copy)."""
        if self.released:
            raise RuntimeError("Surface has been released")
        img = self.bitmap.to_pil()
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        else:
            img = img.copy()
        return img

    def close(self) -> None:
        if self.released:
            return
        self.released = True
        self.bitmap.close()

    def __enter__(self) -> "RasterSurface":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


def build_surface(
    page: Any, scale: float, cfg: Optional[RenderConfig] = None
) -> Tuple[RasterSurface, PageTransform]:
    """Prepare a white surface and transform for *page* at *scale*.

    *page* only needs ``width`` and ``height`` in points.
    """
    width, height = compute_dimensions(page.width, page.height, scale)
    log.debug(
        "Page %.2fx%.2f pt at scale %s -> %dx%d px", page.width, page.height, scale, width, height
    )
    surface = RasterSurface.allocate(width, height, cfg)
    return surface, PageTransform.scaling(scale)


def blank_surface(width: int, height: int, cfg: Optional[RenderConfig] = None) -> Image.Image:
    """Opaque white Pillow image with no PDF involved."""
    check_dimensions(width, height, cfg)
    return Image.new("RGBA", (width, height), WHITE_RGBA)
