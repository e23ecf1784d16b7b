"""Single-page PDF rasterization with guaranteed resource cleanup.

Frequently-used symbols are re-exported here.  For the individual
stages import from the relevant subpackage, e.g.::

    from pdf2bitmap.ingest import open_session, probe_access
    from pdf2bitmap.render import build_surface, render_page
    from pdf2bitmap.export import write_atomic
"""

# ── Core models & config ──────────────────────────────────────────────

from .config import ConfigValidationError, RenderConfig
from .errors import (
    CorruptDocumentError,
    DocumentNotFoundError,
    EncodeError,
    ErrorKind,
    InvalidArgumentError,
    InvalidDimensionsError,
    PageIndexOutOfRangeError,
    PermissionDeniedError,
    RenderError,
    RenderFailureError,
    UnknownOperationError,
    WriteError,
)
from .models import (
    DiagnosticReport,
    PlainSurfaceResult,
    RenderRequest,
    RenderResult,
    SourceDocument,
)

# ── Pipeline & service ────────────────────────────────────────────────

from .pipeline import ConversionTrace, PipelineState, StageResult, convert_page, count_pages
from .service import BitmapService, Failure, Success

__all__ = [
    # Models & config
    "RenderConfig",
    "ConfigValidationError",
    "SourceDocument",
    "RenderRequest",
    "RenderResult",
    "PlainSurfaceResult",
    "DiagnosticReport",
    # Errors
    "ErrorKind",
    "RenderError",
    "InvalidArgumentError",
    "DocumentNotFoundError",
    "PermissionDeniedError",
    "CorruptDocumentError",
    "PageIndexOutOfRangeError",
    "InvalidDimensionsError",
    "RenderFailureError",
    "EncodeError",
    "WriteError",
    "UnknownOperationError",
    # Pipeline
    "ConversionTrace",
    "PipelineState",
    "StageResult",
    "convert_page",
    "count_pages",
    # Service
    "BitmapService",
    "Success",
    "Failure",
]
