"""
Module: builder.output.reportlab_backend

Purpose:
    DocumentBackend implementation on top of ReportLab's canvas.
    Measures text with the standard PDF font metrics and converts the
    layout's top-down millimetre coordinates to PDF points.

Key Classes:
    - ReportLabBackend: Measuring and drawing backend

Dependencies:
    - reportlab: PDF generation and font metrics
    - PIL (via reportlab ImageReader): Image decoding

Used By:
    - builder.output.backend.get_default_backend()
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Optional

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .backend import DocumentBackend, Target

if TYPE_CHECKING:
    from quiz_toolkit.builder.layout.models import CircleOp, FontState, ImageOp, LineOp, TextOp

logger = logging.getLogger(__name__)

# Regular, Bold, Italic, BoldItalic faces of the built-in PDF fonts
_STANDARD_FACES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}
DEFAULT_FAMILY = "Helvetica"

UNDERLINE_OFFSET_PT = 1.2
UNDERLINE_WIDTH_PT = 0.5


def resolve_font_name(font: FontState) -> str:
    """
    Map a FontState to a built-in ReportLab face name.

    Unknown families use Helvetica.

    Example:
        >>> resolve_font_name(FontState("Times", 11, "bold", "italic"))
        'Times-BoldItalic'
    """
    faces = _STANDARD_FACES.get(font.family, _STANDARD_FACES[DEFAULT_FAMILY])
    index = (1 if font.is_bold else 0) + (2 if font.is_italic else 0)
    return faces[index]


class ReportLabBackend(DocumentBackend):
    """
    ReportLab canvas backend.

    Measurement needs no open output; drawing requires open() first.

    Example:
        >>> backend = ReportLabBackend()
        >>> backend.measure_text("Hello", FontState())
        9.6...
    """

    def __init__(self) -> None:
        self._canvas: Optional[canvas.Canvas] = None
        self._page_height_pt = 0.0
        self._page_count = 0

    def measure_text(self, text: str, font: FontState) -> float:
        return stringWidth(text, resolve_font_name(font), font.size_pt) / mm

    def open(
        self,
        target: Target,
        page_width: float,
        page_height: float,
        *,
        title: str = "",
    ) -> None:
        self._canvas = canvas.Canvas(target, pagesize=(page_width * mm, page_height * mm))
        if title:
            self._canvas.setTitle(title)
        self._page_height_pt = page_height * mm
        self._page_count = 1

    def new_page(self) -> None:
        c = self._require_canvas()
        c.showPage()
        self._page_count += 1

    def draw_text(self, op: TextOp) -> None:
        c = self._require_canvas()
        font_name = resolve_font_name(op.font)
        x_pt = op.x * mm
        y_pt = self._transform_y(op.y)

        c.saveState()
        c.setFont(font_name, op.font.size_pt)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(x_pt, y_pt, op.text)
        if op.underline:
            width_pt = stringWidth(op.text.rstrip(), font_name, op.font.size_pt)
            c.setLineWidth(UNDERLINE_WIDTH_PT)
            c.line(x_pt, y_pt - UNDERLINE_OFFSET_PT, x_pt + width_pt, y_pt - UNDERLINE_OFFSET_PT)
        c.restoreState()

    def draw_line(self, op: LineOp) -> None:
        c = self._require_canvas()
        c.saveState()
        c.setLineWidth(op.width * mm)
        c.line(op.x1 * mm, self._transform_y(op.y1), op.x2 * mm, self._transform_y(op.y2))
        c.restoreState()

    def draw_circle(self, op: CircleOp) -> None:
        c = self._require_canvas()
        c.saveState()
        c.setFillColorRGB(0, 0, 0)
        c.circle(
            op.x * mm,
            self._transform_y(op.y),
            op.radius * mm,
            stroke=1,
            fill=1 if op.filled else 0,
        )
        c.restoreState()

    def draw_image(self, op: ImageOp) -> None:
        c = self._require_canvas()
        x_pt = op.x * mm
        y_pt = self._transform_y(op.y + op.height)
        try:
            c.drawImage(
                ImageReader(io.BytesIO(op.data)),
                x_pt,
                y_pt,
                width=op.width * mm,
                height=op.height * mm,
                preserveAspectRatio=True,
                mask="auto",
            )
        except (OSError, ValueError) as e:
            # Layout already probed the image; an encoder rejection leaves an
            # empty frame instead of aborting the file.
            logger.warning(f"Could not embed {op.image_format} image: {e}")
            c.rect(x_pt, y_pt, op.width * mm, op.height * mm)

    def save(self) -> None:
        c = self._require_canvas()
        c.showPage()
        c.save()
        logger.debug(f"ReportLab canvas saved with {self._page_count} pages")
        self._canvas = None

    def _require_canvas(self) -> canvas.Canvas:
        if self._canvas is None:
            raise RuntimeError("ReportLabBackend.open() must be called before drawing")
        return self._canvas

    def _transform_y(self, y_mm: float) -> float:
        """Convert top-down millimetres to bottom-up PDF points."""
        return self._page_height_pt - y_mm * mm
