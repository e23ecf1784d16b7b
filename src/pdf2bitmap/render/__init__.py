"""Render stage: surface preparation and PDFium rasterization."""

from .rasterize import render_flags, render_page
from .surface import (
    PageTransform,
    RasterSurface,
    blank_surface,
    build_surface,
    check_dimensions,
    compute_dimensions,
)

__all__ = [
    "PageTransform",
    "RasterSurface",
    "blank_surface",
    "build_surface",
    "check_dimensions",
    "compute_dimensions",
    "render_flags",
    "render_page",
]
