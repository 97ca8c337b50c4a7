"""
Module: builder.layout.composer

Purpose:
    Turn a Quiz and a Template into a multi-page Document.
    Header → student info → questions (with page breaks) → footers.

Key Functions:
    - generate_student_quiz(): Compose with the student quiz template
    - generate_answer_key(): Compose with the answer key template
    - generate_practice_sheet(): Compose with the practice sheet template

Key Classes:
    - DocumentComposer: Layout pipeline bound to a backend and config
    - ComposerState: Phases of one composition

Algorithm:
    1. Header: title, template name, optional totals, rule
    2. Student info block unless answers are shown
    3. For each question by position: estimate height, break the page if it
       would overflow (never at the top of a page), then draw number,
       metadata, text, image and options/answer rules
    4. Finalize: freeze pages and add "Page i of N" footers once the page
       count is known

Dependencies:
    - builder.layout: context, text, images, options, estimator
    - builder.output: DocumentBackend, Document
    - builder.templates: Template registry

Used By:
    - builder.controller: export_quiz()
    - cli: quiz-toolkit export
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, List, Optional, Union

from quiz_toolkit import __version__
from quiz_toolkit.builder.output.backend import ConfigurationError, DocumentBackend, get_default_backend
from quiz_toolkit.builder.output.document import Document
from quiz_toolkit.builder.templates import (
    ANSWER_KEY,
    PRACTICE_SHEET,
    STUDENT_QUIZ,
    Template,
    resolve_template,
)
from quiz_toolkit.core.models.questions import Question, Quiz

from .config import LayoutConfig
from .context import LayoutContext
from .estimator import estimate_question_height, needs_new_page
from .images import place_image
from .models import FontState, Page, TextOp
from .options import render_answer_lines, render_options
from .text import Point, render_content

logger = logging.getLogger(__name__)

PT_TO_MM = 25.4 / 72
HEADING_LEADING = 1.5

CREDIT_TEXT = f"Generated by Quiz Toolkit v{__version__}"
ERROR_PLACEHOLDER = "[Question could not be rendered]"
NAME_FIELD = "Name: ______________________________"
DATE_FIELD = "Date: _______________"


class ComposerState(str, Enum):
    """Phases of one generate_document() call."""
    IDLE = "idle"
    RENDERING_HEADER = "rendering_header"
    RENDERING_QUESTION = "rendering_question"
    NEW_PAGE = "new_page"
    FINALIZING = "finalizing"


_TRANSITIONS = {
    ComposerState.IDLE: {ComposerState.RENDERING_HEADER},
    ComposerState.RENDERING_HEADER: {ComposerState.RENDERING_QUESTION, ComposerState.FINALIZING},
    ComposerState.RENDERING_QUESTION: {
        ComposerState.RENDERING_QUESTION,
        ComposerState.NEW_PAGE,
        ComposerState.FINALIZING,
    },
    ComposerState.NEW_PAGE: {ComposerState.RENDERING_QUESTION},
    ComposerState.FINALIZING: {ComposerState.IDLE},
}


def question_metadata(question: Question, template: Template) -> str:
    """
    Metadata shown beside the question number, e.g. ``[HARD] (3 pts)``.

    Empty when the template hides difficulty and points.
    """
    parts: List[str] = []
    if template.show_difficulty and question.difficulty:
        parts.append(f"[{question.difficulty.upper()}]")
    if template.show_points:
        points = question.points or 1
        parts.append(f"({points} pt)" if points == 1 else f"({points} pts)")
    return " ".join(parts)


def heading_advance(size_pt: float, line_height: float) -> float:
    """Vertical advance after a heading line of the given size."""
    return max(line_height, size_pt * PT_TO_MM * HEADING_LEADING)


class DocumentComposer:
    """
    Layout pipeline for quiz documents.

    The composer measures text through its backend while laying out and
    returns a Document holding the recorded pages; nothing is written until
    the Document is saved. Each generate_document() call uses its own
    LayoutContext, so no layout state survives between calls.

    Attributes:
        backend: Measuring/drawing backend
        config: Layout configuration
        state: Current phase (IDLE between calls)

    Example:
        >>> composer = DocumentComposer()
        >>> doc = composer.generate_document(quiz, ANSWER_KEY)
        >>> doc.save("answer-key.pdf")
    """

    def __init__(
        self,
        backend: Optional[DocumentBackend] = None,
        config: Optional[LayoutConfig] = None,
    ) -> None:
        if backend is None:
            backend = get_default_backend()
        if not isinstance(backend, DocumentBackend):
            raise ConfigurationError(
                f"Expected a DocumentBackend, got {type(backend).__name__}"
            )
        self.backend = backend
        self.config = config or LayoutConfig()
        self.state = ComposerState.IDLE

    # ─────────────────────────────────────────────────────────────────────
    # Pipeline
    # ─────────────────────────────────────────────────────────────────────

    def generate_document(self, quiz: Quiz, template: Union[str, Template]) -> Document:
        """
        Lay out a quiz.

        Args:
            quiz: Quiz to lay out
            template: Template or registry name

        Returns:
            Document with footers on every page

        Raises:
            ValueError: Unknown template name
        """
        template = resolve_template(template)
        ctx = self.new_context()
        try:
            self.render_header(ctx, quiz, template)
            for number, question in enumerate(quiz.ordered_questions, start=1):
                self.render_question(ctx, question, number, template)
            pages = self.finalize(ctx)
        finally:
            self.state = ComposerState.IDLE

        logger.info(
            f"Composed {len(pages)} pages for '{quiz.test_name}' "
            f"({quiz.question_count} questions, {template.name})"
        )
        return Document(
            pages=tuple(pages),
            page_width=self.config.page_width,
            page_height=self.config.page_height,
            backend=self.backend,
            title=quiz.test_name,
            template_name=template.name,
        )

    def new_context(self) -> LayoutContext:
        """Fresh drawing surface for one composition."""
        return LayoutContext(self.backend, self.config)

    def render_header(self, ctx: LayoutContext, quiz: Quiz, template: Template) -> None:
        """Draw title, template name, optional totals, rule and student info."""
        self._transition(ComposerState.RENDERING_HEADER)
        config = self.config
        base = ctx.base_font
        x = config.margin_left
        y = ctx.state.cursor_y

        ctx.draw_text(x, y, quiz.test_name, base.sized(config.title_font_pt).styled(bold=True))
        y += heading_advance(config.title_font_pt, config.line_height)

        ctx.draw_text(x, y, template.name, base.sized(config.subtitle_font_pt))
        y += heading_advance(config.subtitle_font_pt, config.line_height)

        if template.show_points:
            totals = f"Total Questions: {quiz.question_count} | Total Points: {quiz.total_points}"
            ctx.draw_text(x, y, totals, base.sized(config.info_font_pt))
            y += config.line_height

        rule_y = y - config.line_height + config.header_rule_gap
        ctx.draw_line(x, rule_y, config.content_right, rule_y)
        y = rule_y + config.line_height + config.header_rule_gap

        if not template.show_answers:
            y = self._render_student_info(ctx, y)

        ctx.state.cursor_y = y

    def render_question(
        self,
        ctx: LayoutContext,
        question: Question,
        number: int,
        template: Template,
    ) -> None:
        """
        Draw one question at the cursor, starting a new page first if the
        estimate says it would overflow.

        A rendering failure is logged and the question is replaced by a
        single placeholder line.
        """
        self._transition(ComposerState.RENDERING_QUESTION)
        config = self.config

        required = estimate_question_height(question, template, config)
        if not ctx.at_page_top and needs_new_page(ctx.state.cursor_y, required, config):
            logger.debug(
                f"Question {number} needs {required:.1f}mm at y={ctx.state.cursor_y:.1f}mm, "
                f"starting page {ctx.state.page_index + 2}"
            )
            self._transition(ComposerState.NEW_PAGE)
            ctx.new_page()
            self._transition(ComposerState.RENDERING_QUESTION)

        mark = ctx.checkpoint()
        try:
            y = self._draw_question(ctx, question, number, template)
        except Exception as e:
            logger.warning(f"Could not render question {question.id}: {e}")
            ctx.rollback(mark)
            y = self._draw_error_placeholder(ctx, question, number)

        ctx.state.cursor_y = y + config.question_spacing

    def finalize(self, ctx: LayoutContext) -> List[Page]:
        """Freeze pages and add footers now that the page count is known."""
        self._transition(ComposerState.FINALIZING)
        pages = ctx.finish()
        total = len(pages)
        finished = [replace(page, footer=self._footer(page, total, ctx.base_font)) for page in pages]
        self._transition(ComposerState.IDLE)
        return finished

    # ─────────────────────────────────────────────────────────────────────
    # Drawing helpers
    # ─────────────────────────────────────────────────────────────────────

    def _render_student_info(self, ctx: LayoutContext, y: float) -> float:
        config = self.config
        font = ctx.base_font.sized(config.info_font_pt)
        ctx.draw_text(config.margin_left, y, NAME_FIELD, font)
        ctx.draw_text(config.margin_left + config.available_width / 2 + 20, y, DATE_FIELD, font)
        return y + config.line_height * 2

    def _draw_question(
        self,
        ctx: LayoutContext,
        question: Question,
        number: int,
        template: Template,
    ) -> float:
        """Draw a question and return the baseline after it."""
        config = self.config
        base = ctx.base_font
        x = config.margin_left
        text_x = x + config.question_indent
        text_width = config.content_right - text_x
        y = label_y = ctx.state.cursor_y

        ctx.mark_question(question.id)
        ctx.draw_text(x, y, f"{number}.", base.styled(bold=True))

        metadata = question_metadata(question, template)
        if metadata:
            ctx.draw_text(text_x, y, metadata, base.sized(config.info_font_pt).styled(italic=True))
            y += config.line_height

        y = render_content(ctx, question.question_rich, Point(text_x, y), text_width, base)
        if y == label_y:
            # Nothing beside the label; keep its line to itself
            y += config.line_height

        if question.has_image:
            image_top = y - config.line_height / 2
            placement = place_image(
                ctx,
                question.image,
                Point(text_x, image_top),
                min(config.image_max_width, text_width),
                config.image_max_height,
            )
            y = image_top + placement.consumed_height + config.image_spacing + config.line_height / 2

        y += config.options_gap
        if not template.draws_bubbles and not question.is_true_false:
            return render_answer_lines(ctx, y)

        option_x = x + config.bubble_indent
        return render_options(ctx, question, template, Point(option_x, y), config.content_right - option_x)

    def _draw_error_placeholder(self, ctx: LayoutContext, question: Question, number: int) -> float:
        config = self.config
        y = ctx.state.cursor_y
        ctx.mark_question(question.id)
        ctx.draw_text(config.margin_left, y, f"{number}.", ctx.base_font.styled(bold=True))
        ctx.draw_text(
            config.margin_left + config.question_indent,
            y,
            ERROR_PLACEHOLDER,
            ctx.base_font.styled(italic=True),
        )
        return y + config.line_height

    def _footer(self, page: Page, total: int, base: FontState) -> tuple[TextOp, ...]:
        config = self.config
        font = base.sized(config.footer_font_pt)
        y = config.page_height - config.footer_offset
        label = f"Page {page.number} of {total}"
        label_x = config.content_right - self.backend.measure_text(label, font)
        return (
            TextOp(x=config.margin_left, y=y, text=CREDIT_TEXT, font=font),
            TextOp(x=label_x, y=y, text=label, font=font),
        )

    def _transition(self, target: ComposerState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid composer transition {self.state.value} -> {target.value}")
        self.state = target


# ─────────────────────────────────────────────────────────────────────────────
# Convenience functions
# ─────────────────────────────────────────────────────────────────────────────

def generate_student_quiz(
    quiz: Quiz,
    backend: Optional[DocumentBackend] = None,
    config: Optional[LayoutConfig] = None,
    **overrides: Any,
) -> Document:
    """Compose quiz with the Student Quiz template (plus field overrides)."""
    return DocumentComposer(backend, config).generate_document(
        quiz, resolve_template(STUDENT_QUIZ, **overrides)
    )


def generate_answer_key(
    quiz: Quiz,
    backend: Optional[DocumentBackend] = None,
    config: Optional[LayoutConfig] = None,
    **overrides: Any,
) -> Document:
    """Compose quiz with the Teacher Answer Key template (plus field overrides)."""
    return DocumentComposer(backend, config).generate_document(
        quiz, resolve_template(ANSWER_KEY, **overrides)
    )


def generate_practice_sheet(
    quiz: Quiz,
    backend: Optional[DocumentBackend] = None,
    config: Optional[LayoutConfig] = None,
    **overrides: Any,
) -> Document:
    """Compose quiz with the Practice Worksheet template (plus field overrides)."""
    return DocumentComposer(backend, config).generate_document(
        quiz, resolve_template(PRACTICE_SHEET, **overrides)
    )
