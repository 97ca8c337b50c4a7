"""
Module: builder.layout.options

Purpose:
    Draw answer options: bubble glyph, letter label and rich option
    content, with answer highlighting controlled by the template.

Key Functions:
    - render_option(): One bubble + letter + content row
    - render_options(): Every active option of a question
    - render_true_false(): Fixed True/False pair
    - render_answer_lines(): Blank rules for open-response practice sheets

Highlighting:
    An option is highlighted (bold letter and text, filled bubble for the
    filled style) only when the template shows answers and the letter is
    the correct answer.

Dependencies:
    - builder.layout.text: render_content
    - builder.templates: Template, BubbleStyle

Used By:
    - builder.layout.composer: Question options
"""

from __future__ import annotations

import logging
from typing import Optional

from quiz_toolkit.builder.templates import BubbleStyle, Template
from quiz_toolkit.core.models.questions import Question
from quiz_toolkit.core.models.rich_content import PlainText, RichContent, extract_plain_text

from .context import LayoutContext
from .text import Point, render_content

logger = logging.getLogger(__name__)

TRUE_FALSE_OPTIONS = (("A", "True"), ("B", "False"))

# Bubble centre sits this fraction of the radius above the text baseline
BUBBLE_RAISE = 0.7


def is_highlighted(template: Template, is_correct: bool) -> bool:
    """True when the option should be drawn as the shown answer."""
    return bool(is_correct and template.show_answers)


def render_option(
    ctx: LayoutContext,
    letter: str,
    content: Optional[RichContent],
    template: Template,
    is_correct: bool,
    origin: Point,
    max_width: float,
) -> float:
    """
    Draw one option row.

    Args:
        ctx: Layout context to draw into
        letter: Option letter ("A".."F")
        content: Option content
        template: Display template
        is_correct: Whether this letter is the correct answer
        origin: Bubble centre x and first baseline y
        max_width: Width available from origin.x to the right edge

    Returns:
        Baseline for the next row, or origin.y when the option is empty

    Example:
        >>> y = render_option(ctx, "B", PlainText("Paris"), ANSWER_KEY, True, Point(35, 80), 155)
    """
    if not extract_plain_text(content):
        return origin.y

    config = ctx.config
    highlighted = is_highlighted(template, is_correct)
    font = ctx.base_font.styled(bold=highlighted)

    if template.draws_bubbles:
        filled = template.bubble_style == BubbleStyle.FILLED and highlighted
        ctx.draw_circle(
            origin.x,
            origin.y - config.bubble_radius * BUBBLE_RAISE,
            config.bubble_radius,
            filled=filled,
        )

    ctx.draw_text(origin.x + config.option_letter_offset, origin.y, f"{letter}.", font)

    text_origin = Point(origin.x + config.option_text_offset, origin.y)
    text_width = max(max_width - config.option_text_offset, 1.0)
    y = render_content(ctx, content, text_origin, text_width, font)
    return y + config.option_spacing


def render_true_false(
    ctx: LayoutContext,
    question: Question,
    template: Template,
    origin: Point,
    max_width: float,
) -> float:
    """
    Draw the fixed True/False pair, ignoring any stored option text.

    Returns:
        Baseline after the second option
    """
    y = origin.y
    for letter, label in TRUE_FALSE_OPTIONS:
        y = render_option(
            ctx,
            letter,
            PlainText(label),
            template,
            question.correct_answer == letter,
            Point(origin.x, y),
            max_width,
        )
    return y


def render_options(
    ctx: LayoutContext,
    question: Question,
    template: Template,
    origin: Point,
    max_width: float,
) -> float:
    """
    Draw the options of a question.

    True/false questions get the fixed pair. Otherwise letters
    A..LETTERS[option_count - 1] are drawn in order; empty options are
    skipped and letters past option_count are never drawn. A failure in one
    option is logged and the remaining options are still drawn.

    Returns:
        Baseline after the last drawn option
    """
    if question.is_true_false:
        return render_true_false(ctx, question, template, origin, max_width)

    y = origin.y
    for letter in question.active_letters:
        try:
            y = render_option(
                ctx,
                letter,
                question.option(letter),
                template,
                question.correct_answer == letter,
                Point(origin.x, y),
                max_width,
            )
        except Exception as e:
            logger.warning(f"Could not render option {letter} of question {question.id}: {e}")
    return y


def render_answer_lines(ctx: LayoutContext, y: float, count: Optional[int] = None) -> float:
    """
    Draw blank answer rules starting at baseline y.

    Args:
        ctx: Layout context to draw into
        y: Baseline of the first rule
        count: Number of rules (default: config.answer_line_count)

    Returns:
        Baseline below the last rule
    """
    config = ctx.config
    count = config.answer_line_count if count is None else count
    x1 = config.margin_left + config.bubble_indent
    x2 = config.content_right
    for i in range(count):
        line_y = y + i * config.answer_line_spacing
        ctx.draw_line(x1, line_y, x2, line_y)
    return y + count * config.answer_line_spacing
