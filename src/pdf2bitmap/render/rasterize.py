"""Rasterizer: the only place PDFium draws page content."""

from __future__ import annotations

import ctypes
import logging

import pypdfium2.raw as pdfium_c

from ..errors import RenderFailureError
from .surface import PageTransform, RasterSurface

log = logging.getLogger(__name__)


def render_flags(draw_annotations: bool = True) -> int:
    """PDFium flags for display-quality RGBA output."""
    flags = pdfium_c.FPDF_REVERSE_BYTE_ORDER
    if draw_annotations:
        flags |= pdfium_c.FPDF_ANNOT
    return flags


def render_page(
    page,
    surface: RasterSurface,
    transform: PageTransform,
    draw_annotations: bool = True,
) -> None:
    """Draw *page* onto *surface* through *transform*.

    Called once per page.  The clip rectangle is the whole surface.

    Raises
    ------
    RenderFailureError
        When PDFium (or the ctypes layer around it) fails.
    """
    matrix = transform.to_raw()
    clip = pdfium_c.FS_RECTF(0, 0, surface.width, surface.height)
    try:
        pdfium_c.FPDF_RenderPageBitmapWithMatrix(
            surface.raw,
            page.raw,
            ctypes.byref(matrix),
            ctypes.byref(clip),
            render_flags(draw_annotations),
        )
    except Exception as exc:
        raise RenderFailureError(f"Error rendering page {page.index}: {exc}") from exc
    log.debug("Rendered page %d onto %dx%d surface", page.index, surface.width, surface.height)
