"""Ingest stage: file access, render sessions, and the access probe.

Public API
----------
- :func:`probe_document`: existence / size / readability facts for a path
- :func:`validate_document`: the same facts, raised as classified errors
- :func:`open_handle`: scoped read-only file handle
- :class:`RenderSession` / :class:`PageHandle`: one decoded document and its open page
- :func:`open_session`: scoped handle + session
- :func:`probe_access`: step-by-step diagnostic report
"""

from .access import open_handle, probe_document, validate_document
from .probe import probe_access
from .session import PageHandle, RenderSession, open_session

__all__ = [
    "PageHandle",
    "RenderSession",
    "open_handle",
    "open_session",
    "probe_access",
    "probe_document",
    "validate_document",
]
