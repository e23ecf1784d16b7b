"""Page conversion pipeline: staging, timing, and guaranteed cleanup.

One conversion walks a fixed sequence of states::

    idle → validated → session_open → page_open → surface_built
         → rendered → encoded → persisted → done

Any stage may raise; the conversion then ends in ``failed`` and every
resource acquired so far is released before the error propagates.
Release order is page → session → file handle → pixel buffer.  Encoding
runs after the document side has been released, holding only the pixel
buffer; the buffer is released before the encoded bytes are persisted.

Every stage produces a :class:`StageResult` collected on a
:class:`ConversionTrace`, so callers (and debug logs) can see how far a
failed conversion got and where time was spent.
"""

from __future__ import annotations

import logging
import time
import traceback
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional

from .config import RenderConfig
from .export.sink import encode_png, resolve_output_path, write_atomic
from .ingest.access import open_handle, validate_document
from .ingest.session import RenderSession, open_session
from .models import RenderRequest, RenderResult
from .render.rasterize import render_page
from .render.surface import build_surface

log = logging.getLogger(__name__)

# ── States ─────────────────────────────────────────────────────────────


class PipelineState(str, Enum):
    """Where a conversion currently is."""

    idle = "idle"
    validated = "validated"
    session_open = "session_open"
    page_open = "page_open"
    surface_built = "surface_built"
    rendered = "rendered"
    encoded = "encoded"
    persisted = "persisted"
    done = "done"
    failed = "failed"


# Ordered stage names: the canonical conversion sequence.
STAGE_ORDER: List[PipelineState] = [
    PipelineState.validated,
    PipelineState.session_open,
    PipelineState.page_open,
    PipelineState.surface_built,
    PipelineState.rendered,
    PipelineState.encoded,
    PipelineState.persisted,
]


# ── Stage bookkeeping ──────────────────────────────────────────────────


@dataclass
class StageResult:
    """Outcome record for a single conversion stage."""

    stage: str
    status: str = "pending"  # "success" | "failed"
    duration_ms: int = 0
    error: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "stage": self.stage,
            "status": self.status,
            "duration_ms": self.duration_ms,
        }
        if self.error is not None:
            d["error"] = self.error
        return d


@dataclass
class ConversionTrace:
    """State and per-stage records of one conversion."""

    state: PipelineState = PipelineState.idle
    stages: List[StageResult] = field(default_factory=list)
    failed_stage: Optional[str] = None

    def stage(self, name: str) -> Optional[StageResult]:
        for sr in self.stages:
            if sr.stage == name:
                return sr
        return None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "state": self.state.value,
            "stages": [sr.to_dict() for sr in self.stages],
        }
        if self.failed_stage is not None:
            d["failed_stage"] = self.failed_stage
        return d


@contextmanager
def run_stage(trace: ConversionTrace, state: PipelineState) -> Generator[StageResult, None, None]:
    """Time one stage and advance *trace* to *state* on success.

    On failure the trace moves to ``failed`` and the exception is
    re-raised unchanged.
    """
    sr = StageResult(stage=state.value)
    trace.stages.append(sr)
    t0 = time.perf_counter()
    try:
        yield sr
        sr.status = "success"
        trace.state = state
    except Exception as exc:
        sr.status = "failed"
        sr.error = {
            "type": type(exc).__name__,
            "message": str(exc),
            "stack": traceback.format_exc(),
        }
        trace.state = PipelineState.failed
        trace.failed_stage = state.value
        raise
    finally:
        sr.duration_ms = int((time.perf_counter() - t0) * 1000)


# ── Resource guard ─────────────────────────────────────────────────────


def _release(guard: ExitStack, close: Callable[[], None], what: str) -> None:
    """Register *close* on *guard*; a failing close is logged, not raised."""

    def _close() -> None:
        try:
            close()
        except Exception:
            log.exception("Error closing %s", what)

    guard.callback(_close)


# ── Operations ─────────────────────────────────────────────────────────


def convert_page(
    request: RenderRequest,
    cfg: Optional[RenderConfig] = None,
    trace: Optional[ConversionTrace] = None,
) -> RenderResult:
    """Render one page of ``request.file_path`` to a PNG file.

    Parameters
    ----------
    request : RenderRequest
        Source path, page index, scale factor and optional output path.
    cfg : RenderConfig, optional
        Cache directory, PNG level, size limits.
    trace : ConversionTrace, optional
        Filled in with per-stage records when given.

    Returns
    -------
    RenderResult

    Raises
    ------
    RenderError
        The subclass matching the failing stage.  No output file exists
        at the target path after a failure.
    """
    if cfg is None:
        cfg = RenderConfig()
    if trace is None:
        trace = ConversionTrace()

    log.debug(
        "Converting PDF: %s, page: %d, dpi: %d, scale: %s",
        request.file_path,
        request.page_index,
        request.dpi,
        request.scale_factor,
    )

    try:
        # Outer stack holds the pixel buffer; it is released last.
        with ExitStack() as buffers:
            with ExitStack() as guard:
                with run_stage(trace, PipelineState.validated):
                    source = validate_document(request.file_path)

                with run_stage(trace, PipelineState.session_open):
                    fh = guard.enter_context(open_handle(source.path))
                    session = RenderSession.open(fh, source.path)
                    _release(guard, session.close, "session")

                with run_stage(trace, PipelineState.page_open):
                    page = session.open_page(request.page_index)
                    _release(guard, page.close, "page")

                with run_stage(trace, PipelineState.surface_built):
                    surface, transform = build_surface(page, request.scale_factor, cfg)
                    _release(buffers, surface.close, "surface")

                with run_stage(trace, PipelineState.rendered):
                    render_page(page, surface, transform, draw_annotations=cfg.draw_annotations)

                page_count = session.page_count

            with run_stage(trace, PipelineState.encoded):
                data = encode_png(surface.to_image(), compress_level=cfg.png_compress_level)

        # Only the encoded bytes are held from here on.
        with run_stage(trace, PipelineState.persisted):
            target = resolve_output_path(
                request.output_path, request.page_index, cfg.resolved_cache_dir
            )
            write_atomic(data, target)
        trace.state = PipelineState.done
    finally:
        if log.isEnabledFor(logging.DEBUG):
            log.debug("Conversion trace for %s: %s", request.file_path, trace.to_dict())

    log.info("Bitmap saved to: %s", target)
    return RenderResult(
        output_path=target,
        source_path=request.file_path,
        width=surface.width,
        height=surface.height,
        page_count=page_count,
        page_index=request.page_index,
        dpi=request.dpi,
    )


def count_pages(path: Path | str | None) -> int:
    """Return the number of pages of the PDF at *path*.

    Raises
    ------
    InvalidArgumentError, DocumentNotFoundError, PermissionDeniedError, CorruptDocumentError
    """
    source = validate_document(path)
    log.debug("Getting page count for: %s", source.path)
    with open_session(source.path) as session:
        return session.page_count
