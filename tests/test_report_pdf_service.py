"""
tests/test_report_pdf_service.py
PDF report generation and the shared marker palette.
"""
import base64
import io
import os

from PIL import Image

from backend.models.security_analysis import SecurityAnalysis
from backend.services.report_pdf_service import (
    ReportPDFService, clean_text, decode_image, render_annotated_view, report_filename,
)
from backend.utils.markers import MARKER_COLORS, color_for_index, hex_to_rgb


def _satellite_image(width=200, height=100) -> str:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (40, 60, 40)).save(buf, format="JPEG")
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("utf-8")


def _analysis(placements=2, summary=True, reason="Covers the entrance."):
    data = {
        "overview": "Corner lot with an exposed driveway — hedges conceal the side gate.",
        "placements": [
            {"location": f"Placement {i}", "reason": reason, "cameraType": "4K Bullet Camera",
             "coordinates": {"x": 10 + i * 10, "y": 50}}
            for i in range(placements)
        ],
    }
    if summary:
        data["cameraSummary"] = [{"cameraType": "4K Bullet Camera", "quantity": placements}]
    return SecurityAnalysis.model_validate(data)


def test_report_filename():
    assert report_filename("221B Baker Street, London") == "security_report_221b_baker_street__london.pdf"
    assert report_filename("") == "security_report_.pdf"


def test_color_palette_cycles():
    assert color_for_index(0) == "#34d399"
    assert color_for_index(6) == color_for_index(0)
    assert color_for_index(7) == MARKER_COLORS[1]
    assert hex_to_rgb("#34d399") == (0x34, 0xD3, 0x99)


def test_clean_text_folds_to_latin1():
    assert clean_text("It’s “fine” — ok") == "It's \"fine\" - ok"
    assert clean_text(None) == ""


def test_render_annotated_view_draws_markers():
    image = _satellite_image()
    view = render_annotated_view(image, _analysis().placements)
    assert view.size == decode_image(image).size
    # First marker sits at (10%, 50%) in the first palette color
    assert view.getpixel((20, 50)) == hex_to_rgb(MARKER_COLORS[0])


def test_export_report_writes_pdf(tmp_path):
    service = ReportPDFService(output_dir=str(tmp_path))
    path = service.export_report(_satellite_image(), _analysis(), "221B Baker Street, London")

    assert os.path.basename(path) == "security_report_221b_baker_street__london.pdf"
    with open(path, "rb") as f:
        assert f.read(5) == b"%PDF-"


def test_long_report_paginates(tmp_path):
    service = ReportPDFService(output_dir=str(tmp_path))
    analysis = _analysis(placements=12, reason="A long justification sentence. " * 12)
    view = render_annotated_view(_satellite_image(), analysis.placements)
    pdf = service.build_pdf(view, analysis, "1 Long Road")
    assert pdf.page_no() > 1


def test_report_without_summary(tmp_path):
    service = ReportPDFService(output_dir=str(tmp_path))
    path = service.export_report(_satellite_image(), _analysis(summary=False), "1 Short Road")
    assert os.path.exists(path)


def test_reason_longer_than_a_page_flows_onto_new_pages(tmp_path):
    service = ReportPDFService(output_dir=str(tmp_path))
    reason = "\n".join(f"Observation {n}" for n in range(120))
    analysis = _analysis(placements=1, summary=False, reason=reason)
    view = render_annotated_view(_satellite_image(), analysis.placements)

    pdf = service.build_pdf(view, analysis, "1 Long Road")

    # 120 reason lines at 7mm need more than three A4 content areas
    assert pdf.page_no() >= 4
    assert pdf.get_y() <= pdf.h
