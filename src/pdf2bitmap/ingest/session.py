"""Render sessions: one PDFium document context per request.

A :class:`RenderSession` wraps exactly one ``pypdfium2.PdfDocument``
opened from a file handle the caller owns.  Sessions are never pooled:
each request opens its own and closes it before returning.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Optional

import pypdfium2 as pdfium

from ..errors import CorruptDocumentError, PageIndexOutOfRangeError
from .access import open_handle

log = logging.getLogger(__name__)


class PageHandle:
    """One open page of a :class:`RenderSession`.

    ``width`` / ``height`` are the intrinsic page size in points.  The
    handle must be closed before its session; :meth:`close` is
    idempotent.
    """

    def __init__(self, session: "RenderSession", index: int, page: Any) -> None:
        self.session = session
        self.index = index
        self.page = page
        width, height = page.get_size()
        self.width = float(width)
        self.height = float(height)
        self.closed = False

    @property
    def raw(self) -> Any:
        """The underlying ``FPDF_PAGE`` handle."""
        return self.page.raw

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self.page.close()
        finally:
            self.session._page_closed(self)

    def __enter__(self) -> "PageHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def __repr__(self) -> str:
        return f"PageHandle(index={self.index}, width={self.width}, height={self.height})"


class RenderSession:
    """A decoded PDF document bound to one open file handle."""

    def __init__(self, document: Any, path: Path | str) -> None:
        self.document = document
        self.path = Path(path)
        self.page_count = len(document)
        self.closed = False
        self._open_page: Optional[PageHandle] = None

    @classmethod
    def open(
        cls, handle: BinaryIO, path: Path | str, password: Optional[str] = None
    ) -> "RenderSession":
        """Decode the document readable from *handle*.

        Raises
        ------
        CorruptDocumentError
            When PDFium rejects the data (unparseable, encrypted without
            the right password, ...).
        """
        try:
            document = pdfium.PdfDocument(handle, password=password)
        except pdfium.PdfiumError as exc:
            raise CorruptDocumentError(f"Cannot open PDF {path}: {exc}") from exc
        try:
            session = cls(document, path)
        except BaseException:
            document.close()
            raise
        log.debug("Opened session for %s (%d pages)", path, session.page_count)
        return session

    def open_page(self, index: int) -> PageHandle:
        """Open page *index* (zero-based).

        Only one page may be open at a time per session.
        """
        if self.closed:
            raise RuntimeError("Session is closed")
        if self._open_page is not None:
            raise RuntimeError(
                f"Page {self._open_page.index} is still open; close it before opening another"
            )
        if self.page_count == 0:
            raise CorruptDocumentError(f"PDF has no pages: {self.path}")
        if index < 0 or index >= self.page_count:
            raise PageIndexOutOfRangeError(index, self.page_count)

        try:
            page = self.document[index]
        except pdfium.PdfiumError as exc:
            raise CorruptDocumentError(f"Cannot load page {index} of {self.path}: {exc}") from exc

        handle = PageHandle(self, index, page)
        self._open_page = handle
        return handle

    def _page_closed(self, handle: PageHandle) -> None:
        if self._open_page is handle:
            self._open_page = None

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._open_page is not None:
            # Pages are owned by the session; never outlive it.
            log.warning("Closing session for %s with page %d still open", self.path, self._open_page.index)
            self._open_page.close()
        self.document.close()
        log.debug("Closed session for %s", self.path)

    def __enter__(self) -> "RenderSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


@contextmanager
def open_session(path: Path | str, password: Optional[str] = None) -> Iterator[RenderSession]:
    """Open a file handle and a session on it; release both on exit.

    Teardown order is session first, then the file handle.
    """
    with open_handle(path) as fh:
        with RenderSession.open(fh, path, password=password) as session:
            yield session
