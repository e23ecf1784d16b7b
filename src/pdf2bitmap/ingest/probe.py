"""Access probe: diagnose why a PDF cannot be rendered.

Every step records its outcome on a :class:`DiagnosticReport` instead of
raising.  Probing stops at the first failing step since later steps
depend on it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..models import DiagnosticReport
from .access import open_handle, probe_document
from .session import RenderSession

log = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def probe_access(path: Path | str | None) -> DiagnosticReport:
    """Run the access probe for *path*.

    Raises
    ------
    InvalidArgumentError
        Only when *path* is missing.
    """
    doc = probe_document(path)
    report = DiagnosticReport(file_exists=doc.exists)
    if not doc.exists:
        return report

    report.file_size = doc.size
    report.can_read = doc.readable

    try:
        with open_handle(doc.path) as fh:
            report.can_open_handle = True
            try:
                with RenderSession.open(fh, doc.path) as session:
                    report.can_open_renderer = True
                    report.page_count = session.page_count
            except Exception as exc:
                log.debug("Renderer probe failed for %s", doc.path, exc_info=True)
                report.can_open_renderer = False
                report.renderer_error = _describe(exc)
    except Exception as exc:
        log.debug("Handle probe failed for %s", doc.path, exc_info=True)
        report.can_open_handle = False
        report.handle_error = _describe(exc)

    return report
