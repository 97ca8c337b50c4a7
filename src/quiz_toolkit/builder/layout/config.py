"""
Module: builder.layout.config

Purpose:
    Configuration for the page layout engine.
    Defines page dimensions, margins, typography and spacing constants.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.composer: Document composition
    - builder.layout.estimator: Page-break heuristic
    - builder.layout.text / images / options: Renderers
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


# A4 portrait in millimetres
DEFAULT_PAGE_WIDTH_MM = 210.0
DEFAULT_PAGE_HEIGHT_MM = 297.0


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    All lengths are millimetres from the top-left page corner; font sizes
    are points.

    Attributes:
        page_width: Page width
        page_height: Page height
        margin_top: Cursor position at the start of every page
        margin_bottom: Space kept free at the page bottom (footer area)
        margin_left: Left edge of content
        margin_right: Right content margin
        line_height: Advance per wrapped text line
        question_spacing: Gap after each question
        question_indent: Indent of question text after its number
        base_font_pt: Body text size
        script_scale: Size factor for super/subscript runs
        script_offset: Baseline shift for super/subscript runs
        chars_per_line: Estimator's characters per wrapped line
        image_max_height: Tallest image box
        image_max_width: Widest image box (capped by content width)

    Example:
        >>> config = LayoutConfig()
        >>> config.available_width
        170.0  # page_width - margins
    """

    # Page dimensions
    page_width: float = DEFAULT_PAGE_WIDTH_MM
    page_height: float = DEFAULT_PAGE_HEIGHT_MM

    # Margins
    margin_top: float = 20.0
    margin_bottom: float = 25.0
    margin_left: float = 20.0
    margin_right: float = 20.0

    # Typography
    font_family: str = "Helvetica"
    base_font_pt: float = 11.0
    title_font_pt: float = 18.0
    subtitle_font_pt: float = 12.0
    info_font_pt: float = 10.0
    footer_font_pt: float = 8.0
    line_height: float = 6.0
    script_scale: float = 0.7
    script_offset: float = 2.0

    # Spacing
    question_spacing: float = 10.0
    question_indent: float = 10.0
    options_gap: float = 2.0
    option_spacing: float = 2.0
    header_rule_gap: float = 3.0

    # Options
    bubble_radius: float = 2.0
    bubble_indent: float = 15.0
    option_letter_offset: float = 5.0
    option_text_offset: float = 12.0

    # Practice-sheet answer rules
    answer_line_count: int = 3
    answer_line_spacing: float = 8.0

    # Images
    image_max_width: float = 120.0
    image_max_height: float = 60.0
    image_spacing: float = 4.0
    default_image_height: float = 40.0
    placeholder_height: float = 6.0

    # Page-break estimator
    chars_per_line: int = 85

    # Footer
    footer_offset: float = 10.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.available_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.available_height <= 0:
            raise ValueError("Margins exceed page height")
        if self.line_height <= 0:
            raise ValueError(f"line_height must be positive: {self.line_height}")
        if self.chars_per_line <= 0:
            raise ValueError(f"chars_per_line must be positive: {self.chars_per_line}")
        if not (0 < self.script_scale <= 1):
            raise ValueError(f"script_scale must be in (0, 1]: {self.script_scale}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        """
        Build a config from a mapping of field overrides.

        Raises:
            ValueError: Unknown keys or invalid values
        """
        names = {f.name for f in fields(cls)}
        unknown = set(data) - names
        if unknown:
            raise ValueError(f"Unknown layout settings: {sorted(unknown)}")
        return cls(**dict(data))

    @property
    def available_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def available_height(self) -> float:
        """Height available for content (excluding margins)."""
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def content_bottom(self) -> float:
        """Lowest y the page-break check lets content reach."""
        return self.page_height - self.margin_bottom

    @property
    def content_right(self) -> float:
        return self.page_width - self.margin_right

    @property
    def image_reservation(self) -> float:
        """Vertical space the estimator sets aside for a question image."""
        return self.image_max_height + self.image_spacing
