"""Tests for pdf2bitmap.ingest.probe: the step-by-step access probe."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from pdf2bitmap.errors import InvalidArgumentError, PermissionDeniedError
from pdf2bitmap.ingest import probe_access


def test_all_steps_pass(sample_pdf):
    d = probe_access(sample_pdf).to_dict()
    assert d == {
        "fileExists": True,
        "fileSize": sample_pdf.stat().st_size,
        "canRead": True,
        "canOpenHandle": True,
        "canOpenRenderer": True,
        "pageCount": 3,
    }


def test_missing_file(tmp_path):
    assert probe_access(tmp_path / "x.pdf").to_dict() == {"fileExists": False}


def test_null_path():
    with pytest.raises(InvalidArgumentError):
        probe_access(None)


def test_corrupt_recorded_not_raised(corrupt_pdf):
    rep = probe_access(corrupt_pdf)
    assert rep.can_open_handle is True
    assert rep.can_open_renderer is False
    assert "Cannot open PDF" in rep.renderer_error
    assert rep.page_count is None


def test_handle_failure_recorded(sample_pdf):
    with patch(
        "pdf2bitmap.ingest.probe.open_handle",
        side_effect=PermissionDeniedError("Cannot read file (permission denied)"),
    ):
        rep = probe_access(sample_pdf)
    assert rep.can_open_handle is False
    assert "permission denied" in rep.handle_error
    assert rep.can_open_renderer is None


def test_unexpected_renderer_fault_recorded(sample_pdf):
    with patch(
        "pdf2bitmap.ingest.probe.RenderSession.open", side_effect=MemoryError()
    ):
        rep = probe_access(sample_pdf)
    assert rep.can_open_renderer is False
    assert rep.renderer_error == "MemoryError"


def test_embedded_nul_reported_missing(tmp_path):
    rep = probe_access(str(tmp_path / "a\x00b.pdf"))
    assert rep.to_dict() == {"fileExists": False}
