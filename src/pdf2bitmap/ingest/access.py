"""Document access: existence, size and read-permission checks.

Nothing here interprets PDF content.  :func:`probe_document` only
reports facts; :func:`validate_document` turns the same facts into
classified errors; :func:`open_handle` opens the read-only file handle a
render session is bound to.
"""

from __future__ import annotations

import logging
import os
import stat
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from ..errors import CorruptDocumentError, DocumentNotFoundError, PermissionDeniedError
from ..models import SourceDocument, require_path

log = logging.getLogger(__name__)


def probe_document(path: Path | str | None) -> SourceDocument:
    """Report existence, size and readability of *path*.

    Raises
    ------
    InvalidArgumentError
        Only when *path* itself is missing.  A missing or unreadable file
        is reported through ``False`` fields, never raised.
    """
    pdf_path = Path(require_path(path))
    # ValueError: the OS cannot name the path at all (embedded NUL).
    try:
        st = pdf_path.stat()
        readable = os.access(pdf_path, os.R_OK)
    except (OSError, ValueError):
        log.debug("Cannot stat %r", str(pdf_path), exc_info=True)
        return SourceDocument(path=pdf_path, exists=False)

    return SourceDocument(
        path=pdf_path,
        exists=True,
        size=st.st_size,
        readable=readable,
        is_file=stat.S_ISREG(st.st_mode),
    )


def validate_document(path: Path | str | None) -> SourceDocument:
    """Probe *path* and raise for anything a render session cannot open."""
    doc = probe_document(path)
    if not doc.exists:
        raise DocumentNotFoundError(f"PDF file not found at path: {doc.path}")
    if not doc.readable:
        raise PermissionDeniedError(f"Cannot read file (permission denied): {doc.path}")
    if not doc.is_file:
        raise CorruptDocumentError(f"Not a file: {doc.path}")
    return doc


@contextmanager
def open_handle(path: Path | str) -> Iterator[BinaryIO]:
    """Open *path* read-only; the handle is closed on every exit path."""
    try:
        fh = open(path, "rb")
    except FileNotFoundError as exc:
        raise DocumentNotFoundError(f"PDF file not found at path: {path}") from exc
    except PermissionError as exc:
        raise PermissionDeniedError(f"Cannot read file (permission denied): {path}") from exc
    except IsADirectoryError as exc:
        raise CorruptDocumentError(f"Not a file: {path}") from exc

    log.debug("Opened handle for %s", path)
    with fh:
        yield fh
