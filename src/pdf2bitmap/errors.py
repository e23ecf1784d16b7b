"""Error taxonomy shared by every rasterization stage.

Each fallible step raises the :class:`RenderError` subclass for its
:class:`ErrorKind`.  The service adapter turns these into structured
failure payloads; anything that is not a :class:`RenderError` is reported
as :attr:`ErrorKind.unexpected`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Stable tags callers can branch on."""

    invalid_argument = "invalid_argument"
    file_not_found = "file_not_found"
    permission_denied = "permission_denied"
    corrupt_document = "corrupt_document"
    page_index_out_of_range = "page_index_out_of_range"
    invalid_dimensions = "invalid_dimensions"
    render_failure = "render_failure"
    encode_failure = "encode_failure"
    write_failure = "write_failure"
    not_implemented = "not_implemented"
    unexpected = "unexpected"


class RenderError(Exception):
    """Base class for classified failures."""

    kind: ErrorKind = ErrorKind.unexpected

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"code": self.kind.value, "message": self.message}
        if self.context:
            d["context"] = self.context
        return d


class InvalidArgumentError(RenderError):
    kind = ErrorKind.invalid_argument


class DocumentNotFoundError(RenderError):
    kind = ErrorKind.file_not_found


class PermissionDeniedError(RenderError):
    kind = ErrorKind.permission_denied


class CorruptDocumentError(RenderError):
    kind = ErrorKind.corrupt_document


class PageIndexOutOfRangeError(RenderError):
    """Raised when a page index falls outside ``[0, page_count)``."""

    kind = ErrorKind.page_index_out_of_range

    def __init__(self, index: int, page_count: int):
        super().__init__(
            f"Invalid page number: {index}, total pages: {page_count}",
            {"pageIndex": index, "pageCount": page_count},
        )
        self.index = index
        self.page_count = page_count


class InvalidDimensionsError(RenderError):
    kind = ErrorKind.invalid_dimensions


class RenderFailureError(RenderError):
    kind = ErrorKind.render_failure


class EncodeError(RenderError):
    kind = ErrorKind.encode_failure


class WriteError(RenderError):
    kind = ErrorKind.write_failure


class UnknownOperationError(RenderError):
    kind = ErrorKind.not_implemented
