"""
Module: builder.layout

Purpose:
    Page layout for quiz documents.
    Measures and wraps rich content, places images and options, decides
    page breaks, and records the draw operations of every page.

Key Functions:
    - generate_student_quiz(): Student quiz document
    - generate_answer_key(): Answer key document
    - generate_practice_sheet(): Practice worksheet document
    - estimate_question_height(): Page-break heuristic

Key Classes:
    - LayoutConfig: Configuration for page layout
    - DocumentComposer: Layout pipeline
    - LayoutContext: Per-composition drawing surface
    - Page: Finished page of draw operations

Dependencies:
    - PIL: Image dimensions
    - quiz_toolkit.core.models: Question, Quiz, RichContent
    - builder.output.backend: Text measurement

Used By:
    - builder.controller: Export pipeline
    - cli: quiz-toolkit export
"""

from .config import LayoutConfig
from .models import FontState, LayoutState, TextOp, LineOp, CircleOp, ImageOp, Page
from .context import LayoutContext
from .text import Point, render_content, render_runs
from .images import ImageDecodeError, ImagePlacement, fit_dimensions, place_image
from .options import render_answer_lines, render_option, render_options, render_true_false
from .estimator import estimate_question_height, needs_new_page
from .composer import (
    ComposerState,
    DocumentComposer,
    generate_answer_key,
    generate_practice_sheet,
    generate_student_quiz,
)

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "FontState",
    "LayoutState",
    "TextOp",
    "LineOp",
    "CircleOp",
    "ImageOp",
    "Page",
    "LayoutContext",
    "Point",
    # Renderers
    "render_content",
    "render_runs",
    "ImageDecodeError",
    "ImagePlacement",
    "fit_dimensions",
    "place_image",
    "render_option",
    "render_options",
    "render_true_false",
    "render_answer_lines",
    # Pagination
    "estimate_question_height",
    "needs_new_page",
    # Composition
    "ComposerState",
    "DocumentComposer",
    "generate_student_quiz",
    "generate_answer_key",
    "generate_practice_sheet",
]
