"""Service object exposing the rasterization operations by name.

A :class:`BitmapService` is constructed once at startup and disposed
with :meth:`BitmapService.close`.  It holds only its configuration, so
concurrent calls never share a session, page or buffer.

:meth:`BitmapService.call` is the single adapter between the named
operations and their typed implementations: every outcome becomes a
:class:`Success` or a :class:`Failure`.  Classified errors keep their
:class:`~pdf2bitmap.errors.ErrorKind`; anything else is reported as
``unexpected`` with its traceback.

Usage::

    with BitmapService() as svc:
        res = svc.call("convertPage", {"filePath": "/tmp/a.pdf", "pageIndex": 1})
        if res.ok:
            print(res.value["filePath"])
        else:
            print(res.kind, res.message)
"""

from __future__ import annotations

import logging
import platform
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .config import RenderConfig
from .errors import ErrorKind, RenderError, UnknownOperationError
from .export.sink import encode_png
from .ingest.probe import probe_access
from .models import (
    DiagnosticReport,
    PlainSurfaceResult,
    RenderRequest,
    RenderResult,
    as_int,
    require_path,
)
from .pipeline import convert_page, count_pages
from .render.surface import blank_surface

log = logging.getLogger(__name__)

# ── Call results ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Success:
    value: Any
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    details: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    ok: bool = field(default=False, init=False)

    @classmethod
    def from_error(cls, exc: RenderError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message, context=dict(exc.context))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "code": self.kind.value,
            "message": self.message,
            "details": self.details,
        }
        if self.context:
            d["context"] = self.context
        return d


CallResult = Union[Success, Failure]


# ── Service ────────────────────────────────────────────────────────────


class BitmapService:
    """Host for the page-rasterization operations."""

    def __init__(self, cfg: Optional[RenderConfig] = None) -> None:
        self.cfg = cfg if cfg is not None else RenderConfig()
        self.closed = False
        self._operations: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "getPlatformVersion": self._call_platform_version,
            "testAccess": self._call_test_access,
            "renderPlainSurface": self._call_render_plain_surface,
            "convertPage": self._call_convert_page,
            "getPageCount": self._call_get_page_count,
        }
        log.debug("BitmapService started (cache_dir=%s)", self.cfg.resolved_cache_dir)

    # ── Typed operations ───────────────────────────────────────────────

    def platform_version(self) -> str:
        return f"{platform.system()} {platform.release()}"

    def test_access(self, file_path: Any) -> DiagnosticReport:
        """Diagnose access to *file_path*; probe failures are recorded, not raised."""
        return probe_access(file_path)

    def render_plain_surface(
        self, width: Optional[int] = None, height: Optional[int] = None
    ) -> PlainSurfaceResult:
        """Encode a blank white surface inline; no PDF is involved."""
        if width is None:
            width = self.cfg.plain_surface_width
        if height is None:
            height = self.cfg.plain_surface_height
        width = as_int("width", width)
        height = as_int("height", height)
        image = blank_surface(width, height, self.cfg)
        data = encode_png(image, compress_level=self.cfg.png_compress_level)
        return PlainSurfaceResult(image_bytes=data, width=width, height=height)

    def convert_page(self, request: RenderRequest) -> RenderResult:
        return convert_page(request, self.cfg)

    def get_page_count(self, file_path: Any) -> int:
        return count_pages(require_path(file_path))

    # ── Named-operation adapter ────────────────────────────────────────

    def _call_platform_version(self, args: Mapping[str, Any]) -> str:
        return self.platform_version()

    def _call_test_access(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        return self.test_access(require_path(args.get("filePath"))).to_dict()

    def _call_render_plain_surface(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        return self.render_plain_surface(args.get("width"), args.get("height")).to_dict()

    def _call_convert_page(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        request = RenderRequest.from_arguments(args, self.cfg)
        return self.convert_page(request).to_dict()

    def _call_get_page_count(self, args: Mapping[str, Any]) -> int:
        return self.get_page_count(args.get("filePath"))

    def call(self, method: str, arguments: Optional[Mapping[str, Any]] = None) -> CallResult:
        """Run operation *method* with a loosely typed argument mapping."""
        args = arguments or {}
        try:
            if self.closed:
                raise RuntimeError("service is closed")
            operation = self._operations.get(method)
            if operation is None:
                raise UnknownOperationError(f"Operation not implemented: {method}")
            return Success(operation(args))
        except RenderError as exc:
            log.warning("%s failed (%s): %s", method, exc.kind.value, exc.message)
            return Failure.from_error(exc)
        except Exception as exc:
            log.exception("Unexpected error in %s", method)
            return Failure(
                kind=ErrorKind.unexpected,
                message=f"Unexpected error: {exc}",
                details=traceback.format_exc(),
            )

    # ── Lifecycle ──────────────────────────────────────────────────────

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._operations.clear()
        log.debug("BitmapService closed")

    def __enter__(self) -> "BitmapService":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
