from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .config import RenderConfig
from .errors import InvalidArgumentError

# ── Argument coercion helpers ──────────────────────────────────────────


def _first_present(args: Mapping[str, Any], *names: str) -> Any:
    """Return the first non-None value among *names* (aliases)."""
    for name in names:
        value = args.get(name)
        if value is not None:
            return value
    return None


def as_int(name: str, value: Any) -> int:
    # bool is an int subclass; a True page index is a caller bug.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    return value


def as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}")
    return float(value)


def require_path(value: Any) -> str:
    """Validate a required ``filePath`` argument."""
    if value is None:
        raise InvalidArgumentError("File path cannot be null")
    if not isinstance(value, (str, Path)) or not str(value):
        raise InvalidArgumentError(f"File path must be a non-empty string, got {value!r}")
    return str(value)


# ── Value objects ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class SourceDocument:
    """Filesystem facts about a PDF path, evaluated once per request."""

    path: Path
    exists: bool
    size: int = 0
    readable: bool = False
    is_file: bool = False

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "exists": self.exists,
            "size": self.size,
            "readable": self.readable,
        }


@dataclass(frozen=True)
class RenderRequest:
    """Validated input for a single page conversion.

    ``dpi`` is carried as metadata only; pixel dimensions come from
    ``scale_factor`` alone.
    """

    file_path: str
    page_index: int = 0
    dpi: int = 300
    scale_factor: float = 2.0
    output_path: Optional[str] = None

    def __post_init__(self) -> None:
        require_path(self.file_path)
        as_int("pageIndex", self.page_index)
        as_int("dpi", self.dpi)
        scale = as_float("scaleFactor", self.scale_factor)
        if not math.isfinite(scale) or scale <= 0:
            raise InvalidArgumentError(
                f"scaleFactor must be a finite number > 0, got {self.scale_factor!r}"
            )
        if self.output_path is not None and not str(self.output_path):
            raise InvalidArgumentError("outputPath cannot be empty")

    @classmethod
    def from_arguments(
        cls, args: Optional[Mapping[str, Any]], cfg: Optional[RenderConfig] = None
    ) -> "RenderRequest":
        """Build a request from a loosely typed argument mapping.

        Missing optional arguments take their defaults from *cfg*.  The
        legacy names ``pageNumber`` and ``savePath`` are accepted as
        aliases for ``pageIndex`` and ``outputPath``.
        """
        if cfg is None:
            cfg = RenderConfig()
        args = args or {}

        file_path = require_path(args.get("filePath"))
        page_index = _first_present(args, "pageIndex", "pageNumber")
        dpi = args.get("dpi")
        scale = args.get("scaleFactor")
        output_path = _first_present(args, "outputPath", "savePath")
        if output_path is not None and not isinstance(output_path, (str, Path)):
            raise InvalidArgumentError(f"outputPath must be a string, got {output_path!r}")

        return cls(
            file_path=file_path,
            page_index=cfg.default_page_index if page_index is None else as_int("pageIndex", page_index),
            dpi=cfg.default_dpi if dpi is None else as_int("dpi", dpi),
            scale_factor=cfg.default_scale if scale is None else as_float("scaleFactor", scale),
            output_path=None if output_path is None else str(output_path),
        )


@dataclass(frozen=True)
class RenderResult:
    """Outcome of a successful page conversion."""

    output_path: Path
    source_path: str
    width: int
    height: int
    page_count: int
    page_index: int = 0
    dpi: int = 300

    def to_dict(self) -> dict:
        return {
            "filePath": str(self.output_path),
            "originalPath": self.source_path,
            "width": self.width,
            "height": self.height,
            "pageCount": self.page_count,
        }


@dataclass(frozen=True)
class PlainSurfaceResult:
    """Inline PNG of a blank surface."""

    image_bytes: bytes
    width: int
    height: int

    def to_dict(self) -> dict:
        return {
            "base64Image": base64.b64encode(self.image_bytes).decode("ascii"),
            "width": self.width,
            "height": self.height,
        }


@dataclass
class DiagnosticReport:
    """Result of the access probe, filled in step by step.

    Fields left as ``None`` were never reached (an earlier probe failed
    or the file does not exist) and are omitted from :meth:`to_dict`.
    """

    file_exists: bool = False
    file_size: Optional[int] = None
    can_read: Optional[bool] = None
    can_open_handle: Optional[bool] = None
    handle_error: Optional[str] = None
    can_open_renderer: Optional[bool] = None
    renderer_error: Optional[str] = None
    page_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"fileExists": self.file_exists}
        optional = [
            ("fileSize", self.file_size),
            ("canRead", self.can_read),
            ("canOpenHandle", self.can_open_handle),
            ("handleError", self.handle_error),
            ("canOpenRenderer", self.can_open_renderer),
            ("rendererError", self.renderer_error),
            ("pageCount", self.page_count),
        ]
        for key, value in optional:
            if value is not None:
                d[key] = value
        return d
