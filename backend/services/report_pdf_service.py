import base64
import io
import logging
import os
import re
from typing import List, Optional

from fpdf import FPDF
from PIL import Image, ImageDraw

from backend.models.security_analysis import CameraPlacement, SecurityAnalysis
from backend.utils.markers import color_for_index, hex_to_rgb

logger = logging.getLogger(__name__)

MARGIN = 15
FONT_SIZE_NORMAL = 11
LINE_HEIGHT = 7


def clean_text(text: str) -> str:
    """Replace non-latin-1 characters so the core PDF fonts can render them."""
    if not text:
        return ""
    replacements = {
        "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
        "\u2013": "-", "\u2014": "-", "\u2026": "...", "\u2022": "*",
        "\u00b0": " deg", "\u00a0": " ",
    }
    for char, replacement in replacements.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", "replace").decode("latin-1")


def report_filename(address: str) -> str:
    safe = re.sub(r"[^a-z0-9]", "_", address, flags=re.IGNORECASE).lower()
    return f"security_report_{safe}.pdf"


def decode_image(image: str) -> Image.Image:
    """Open a data URL (or bare base64) as an RGB PIL image."""
    data = image.split(",", 1)[1] if image.startswith("data:") else image
    with Image.open(io.BytesIO(base64.b64decode(data))) as img:
        return img.convert("RGB")


def render_annotated_view(image: str, placements: List[CameraPlacement],
                          hovered: Optional[int] = None) -> Image.Image:
    """
    Composite the placement markers onto the satellite image, at the same
    percentage positions and colors the aerial view uses on screen.
    """
    img = decode_image(image)
    width, height = img.size
    radius = max(6, width // 120)

    overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    for i, placement in enumerate(placements):
        cx = placement.coordinates.x * width / 100
        cy = placement.coordinates.y * height / 100
        rgb = hex_to_rgb(color_for_index(i))
        if hovered == i:
            halo = radius * 8
            draw.ellipse([cx - halo, cy - halo, cx + halo, cy + halo], fill=rgb + (77,))
        r = radius * 1.5 if hovered == i else radius
        draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=rgb + (255,), outline=(255, 255, 255, 255), width=3)

    return Image.alpha_composite(img.convert("RGBA"), overlay).convert("RGB")


class ReportPDFService:
    """
    Builds the downloadable security report: header, captured aerial view,
    overview, color-keyed placements and the equipment summary.
    """

    def __init__(self, output_dir: Optional[str] = None):
        self.output_dir = output_dir or "outputs"

    def _check_page_break(self, pdf: FPDF, space_needed: float):
        if pdf.get_y() + space_needed > pdf.h - MARGIN:
            pdf.add_page()
            pdf.set_y(MARGIN)

    def _split_lines(self, pdf: FPDF, text: str, width: float) -> List[str]:
        return pdf.multi_cell(width, LINE_HEIGHT, clean_text(text), dry_run=True, output="LINES")

    def _draw_header(self, pdf: FPDF, address: str, content_width: float):
        pdf.set_font("Helvetica", "B", 22)
        pdf.cell(content_width, 10, "Security Analysis Report", align="C", ln=True)
        pdf.set_font("Helvetica", "", FONT_SIZE_NORMAL)
        pdf.cell(content_width, 8, clean_text(address), align="C", ln=True)
        pdf.ln(7)

    def _draw_view(self, pdf: FPDF, view: Image.Image, content_width: float):
        img_height = view.height * content_width / view.width
        buf = io.BytesIO()
        view.save(buf, format="PNG")
        buf.seek(0)
        pdf.image(buf, x=MARGIN, y=pdf.get_y(), w=content_width, h=img_height)
        pdf.set_y(pdf.get_y() + img_height + 15)

    def _draw_overview(self, pdf: FPDF, overview: str, content_width: float):
        self._check_page_break(pdf, 20)
        pdf.set_font("Helvetica", "B", 16)
        pdf.cell(content_width, LINE_HEIGHT, "Security Overview", ln=True)

        pdf.set_font("Helvetica", "", FONT_SIZE_NORMAL)
        for line in self._split_lines(pdf, overview, content_width):
            self._check_page_break(pdf, LINE_HEIGHT)
            pdf.cell(content_width, LINE_HEIGHT, line, ln=True)
        pdf.ln(10)

    def _draw_placements(self, pdf: FPDF, placements: List[CameraPlacement], content_width: float):
        self._check_page_break(pdf, 20)
        pdf.set_font("Helvetica", "B", 16)
        pdf.cell(content_width, 10, "Recommended Placements", ln=True)

        text_width = content_width - 5
        for i, placement in enumerate(placements):
            pdf.set_font("Helvetica", "", FONT_SIZE_NORMAL)
            reason_lines = self._split_lines(pdf, placement.reason, text_width - 5)
            block_height = LINE_HEIGHT * 3 + len(reason_lines) * LINE_HEIGHT
            self._check_page_break(pdf, min(block_height, pdf.h - MARGIN * 2))

            y = pdf.get_y()
            pdf.set_fill_color(*hex_to_rgb(color_for_index(i)))
            pdf.rect(MARGIN, y + 2, 3, 3, "F")

            pdf.set_x(MARGIN + 5)
            pdf.set_font("Helvetica", "B", 12)
            pdf.cell(text_width, LINE_HEIGHT, clean_text(placement.location), ln=True)

            pdf.set_x(MARGIN + 5)
            pdf.set_font("Helvetica", "I", FONT_SIZE_NORMAL)
            pdf.set_text_color(100)
            pdf.cell(text_width, LINE_HEIGHT, clean_text(placement.camera_type), ln=True)
            pdf.set_text_color(0)

            pdf.set_font("Helvetica", "", FONT_SIZE_NORMAL)
            for line in reason_lines:
                self._check_page_break(pdf, LINE_HEIGHT)
                pdf.set_x(MARGIN + 5)
                pdf.cell(text_width, LINE_HEIGHT, line, ln=True)
            pdf.ln(8)

    def _draw_summary(self, pdf: FPDF, analysis: SecurityAnalysis, content_width: float):
        summary = analysis.camera_summary or []
        if not summary:
            return
        self._check_page_break(pdf, 20 + len(summary) * LINE_HEIGHT)
        pdf.ln(2)
        pdf.set_font("Helvetica", "B", 16)
        pdf.cell(content_width, 10, "Required Equipment Summary", ln=True)

        for item in summary:
            pdf.set_font("Helvetica", "", FONT_SIZE_NORMAL)
            pdf.cell(content_width * 0.75, LINE_HEIGHT, clean_text(item.camera_type))
            pdf.set_font("Helvetica", "B", FONT_SIZE_NORMAL)
            pdf.cell(content_width * 0.25, LINE_HEIGHT, f"x {item.quantity}", align="R", ln=True)

    def build_pdf(self, view: Image.Image, analysis: SecurityAnalysis, address: str) -> FPDF:
        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.set_auto_page_break(False)
        pdf.set_margins(MARGIN, MARGIN, MARGIN)
        pdf.add_page()
        content_width = pdf.w - MARGIN * 2

        self._draw_header(pdf, address, content_width)
        self._draw_view(pdf, view, content_width)
        self._draw_overview(pdf, analysis.overview, content_width)
        self._draw_placements(pdf, analysis.placements, content_width)
        self._draw_summary(pdf, analysis, content_width)
        return pdf

    def export_report(self, view_image: str, analysis: SecurityAnalysis, address: str,
                      hovered: Optional[int] = None) -> str:
        """
        Render the annotated view and write the PDF report.

        Returns the path of the written file inside `output_dir`.
        """
        view = render_annotated_view(view_image, analysis.placements, hovered)
        pdf = self.build_pdf(view, analysis, address)

        os.makedirs(self.output_dir, exist_ok=True)
        output_path = os.path.join(self.output_dir, report_filename(address))
        pdf.output(output_path)
        logger.info(f"Security report written to {output_path} ({pdf.page_no()} pages)")
        return output_path
