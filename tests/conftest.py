"""Shared test fixtures for pdf2bitmap."""

from pathlib import Path
from typing import Iterable, Optional, Tuple

import pytest

from pdf2bitmap.config import RenderConfig

# Black 50x50 pt square at (10, 10) in PDF (bottom-left origin) space.
BLACK_SQUARE = b"0 0 0 rg 10 10 50 50 re f"

# ── Helpers ────────────────────────────────────────────────────────────


def build_pdf(
    page_sizes: Iterable[Tuple[float, float]],
    content: bytes = b"",
) -> bytes:
    """Return bytes of a minimal valid PDF.

    Each entry of *page_sizes* is a ``(width, height)`` MediaBox in
    points.  Every page gets the same *content* stream.
    """
    sizes = list(page_sizes)
    n = len(sizes)
    kids = " ".join(f"{3 + 2 * i} 0 R" for i in range(n))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {n} >>".encode(),
    ]
    for i, (w, h) in enumerate(sizes):
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {w} {h}] "
            f"/Resources << >> /Contents {4 + 2 * i} 0 R >>".encode()
        )
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref
    return bytes(out)


def write_pdf(
    path: Path,
    page_sizes: Iterable[Tuple[float, float]] = ((200, 100),),
    content: Optional[bytes] = None,
) -> Path:
    """Write a PDF built by :func:`build_pdf` to *path*."""
    path.write_bytes(build_pdf(page_sizes, content or b""))
    return path


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def sample_pdf(tmp_path) -> Path:
    """Three pages: 200x100, 101x51 and US letter (612x792)."""
    return write_pdf(tmp_path / "sample.pdf", [(200, 100), (101, 51), (612, 792)])


@pytest.fixture
def square_pdf(tmp_path) -> Path:
    """One 100x100 page with a black square in its lower-left area."""
    return write_pdf(tmp_path / "square.pdf", [(100, 100)], BLACK_SQUARE)


@pytest.fixture
def corrupt_pdf(tmp_path) -> Path:
    f = tmp_path / "corrupt.pdf"
    f.write_bytes(b"this is not a pdf file at all")
    return f


@pytest.fixture
def cfg(tmp_path) -> RenderConfig:
    """Config whose synthesized outputs land under the test's tmp dir."""
    return RenderConfig(cache_dir=tmp_path / "cache")
