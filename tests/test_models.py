"""Tests for pdf2bitmap.models: request parsing and payload shapes."""

import base64
from pathlib import Path

import pytest

from pdf2bitmap.config import RenderConfig
from pdf2bitmap.errors import InvalidArgumentError
from pdf2bitmap.models import (
    DiagnosticReport,
    PlainSurfaceResult,
    RenderRequest,
    RenderResult,
    SourceDocument,
)


class TestRenderRequest:
    def test_defaults(self):
        req = RenderRequest(file_path="a.pdf")
        assert req.page_index == 0
        assert req.dpi == 300
        assert req.scale_factor == 2.0
        assert req.output_path is None

    def test_from_arguments_defaults(self):
        req = RenderRequest.from_arguments({"filePath": "/x/a.pdf"})
        assert req == RenderRequest(file_path="/x/a.pdf")

    def test_from_arguments_uses_config_defaults(self):
        cfg = RenderConfig(default_dpi=72, default_scale=1.25)
        req = RenderRequest.from_arguments({"filePath": "a.pdf"}, cfg)
        assert req.dpi == 72
        assert req.scale_factor == 1.25

    def test_from_arguments_all_fields(self):
        req = RenderRequest.from_arguments(
            {
                "filePath": "a.pdf",
                "pageIndex": 3,
                "dpi": 150,
                "scaleFactor": 3,
                "outputPath": "/out/p3.png",
            }
        )
        assert req.page_index == 3
        assert req.dpi == 150
        assert req.scale_factor == 3.0
        assert isinstance(req.scale_factor, float)
        assert req.output_path == "/out/p3.png"

    def test_legacy_aliases(self):
        req = RenderRequest.from_arguments(
            {"filePath": "a.pdf", "pageNumber": 2, "savePath": "/out/x.png"}
        )
        assert req.page_index == 2
        assert req.output_path == "/out/x.png"

    def test_canonical_name_wins_over_alias(self):
        req = RenderRequest.from_arguments({"filePath": "a.pdf", "pageIndex": 1, "pageNumber": 4})
        assert req.page_index == 1

    def test_negative_index_is_accepted_until_page_count_known(self):
        req = RenderRequest.from_arguments({"filePath": "a.pdf", "pageIndex": -1})
        assert req.page_index == -1

    @pytest.mark.parametrize("args", [None, {}, {"filePath": None}, {"filePath": ""}])
    def test_missing_path(self, args):
        with pytest.raises(InvalidArgumentError):
            RenderRequest.from_arguments(args)

    @pytest.mark.parametrize(
        "extra",
        [
            {"pageIndex": "1"},
            {"pageIndex": True},
            {"pageIndex": 1.5},
            {"dpi": "300"},
            {"scaleFactor": "2"},
            {"scaleFactor": 0},
            {"scaleFactor": -1.0},
            {"scaleFactor": float("nan")},
            {"scaleFactor": float("inf")},
            {"scaleFactor": float("-inf")},
            {"outputPath": 42},
        ],
    )
    def test_bad_argument_types(self, extra):
        args = {"filePath": "a.pdf", **extra}
        with pytest.raises(InvalidArgumentError):
            RenderRequest.from_arguments(args)

    def test_path_object_accepted(self, tmp_path):
        req = RenderRequest.from_arguments({"filePath": tmp_path / "a.pdf"})
        assert req.file_path == str(tmp_path / "a.pdf")


class TestPayloads:
    def test_render_result_to_dict(self):
        res = RenderResult(
            output_path=Path("/cache/page_0_1.png"),
            source_path="/docs/a.pdf",
            width=400,
            height=200,
            page_count=3,
        )
        assert res.to_dict() == {
            "filePath": "/cache/page_0_1.png",
            "originalPath": "/docs/a.pdf",
            "width": 400,
            "height": 200,
            "pageCount": 3,
        }

    def test_plain_surface_base64(self):
        res = PlainSurfaceResult(image_bytes=b"\x89PNG", width=1, height=2)
        d = res.to_dict()
        assert base64.b64decode(d["base64Image"]) == b"\x89PNG"
        assert "\n" not in d["base64Image"]
        assert (d["width"], d["height"]) == (1, 2)

    def test_diagnostic_report_missing_file(self):
        assert DiagnosticReport(file_exists=False).to_dict() == {"fileExists": False}

    def test_diagnostic_report_keeps_false_values(self):
        rep = DiagnosticReport(
            file_exists=True,
            file_size=10,
            can_read=True,
            can_open_handle=True,
            can_open_renderer=False,
            renderer_error="Data format error",
        )
        d = rep.to_dict()
        assert d["canOpenRenderer"] is False
        assert d["rendererError"] == "Data format error"
        assert "pageCount" not in d
        assert "handleError" not in d

    def test_source_document_to_dict(self):
        doc = SourceDocument(path=Path("a.pdf"), exists=True, size=5, readable=True, is_file=True)
        assert doc.to_dict() == {"path": "a.pdf", "exists": True, "size": 5, "readable": True}
