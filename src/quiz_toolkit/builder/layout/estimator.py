"""
Module: builder.layout.estimator

Purpose:
    Predict how much vertical space a question needs before it is drawn,
    so the composer can decide whether to start a new page.

Key Functions:
    - estimate_question_height(): Heuristic height for one question
    - fixed_line_overhead(): Lines used by header and options/answer rules
    - needs_new_page(): Overflow test against the content bottom

Algorithm:
    lines  = ceil(len(plain_text) / chars_per_line) + fixed_line_overhead
    height = lines * line_height
             + image_reservation (when the question has an image)
             + question_spacing

    This is a character-count estimate, not a measurement. A question
    whose options run past the bottom margin is drawn as laid out; options
    are never split onto a new page individually.

Dependencies:
    - builder.layout.config: LayoutConfig
    - builder.templates: Template

Used By:
    - builder.layout.composer: Page-break decisions
"""

from __future__ import annotations

import logging
import math

from quiz_toolkit.builder.templates import Template
from quiz_toolkit.core.models.questions import Question

from .config import LayoutConfig

logger = logging.getLogger(__name__)

HEADER_LINES = 1
TRUE_FALSE_LINES = 2


def fixed_line_overhead(question: Question, template: Template, config: LayoutConfig) -> float:
    """
    Lines a question uses besides its wrapped text.

    One header line plus one line per option; true/false questions always
    have two options, and open-response questions (bubble style none)
    count their answer rules converted to line heights.

    Example:
        >>> fixed_line_overhead(six_option_question, STUDENT_QUIZ, LayoutConfig())
        7
    """
    if question.is_true_false:
        return HEADER_LINES + TRUE_FALSE_LINES
    if not template.draws_bubbles:
        rules = config.answer_line_count * config.answer_line_spacing / config.line_height
        return HEADER_LINES + rules
    return HEADER_LINES + question.option_count


def estimate_question_height(question: Question, template: Template, config: LayoutConfig) -> float:
    """
    Estimated height of a question in millimetres.

    Args:
        question: Question to estimate
        template: Display template (decides options vs answer rules)
        config: Layout configuration

    Returns:
        Height including trailing question spacing

    Example:
        >>> estimate_question_height(short_question, STUDENT_QUIZ, LayoutConfig())
        40.0
    """
    text_lines = math.ceil(len(question.plain_text) / config.chars_per_line)
    lines = text_lines + fixed_line_overhead(question, template, config)
    height = lines * config.line_height + config.question_spacing
    if question.has_image:
        height += config.image_reservation
    return height


def needs_new_page(cursor_y: float, required_height: float, config: LayoutConfig) -> bool:
    """True when required_height from cursor_y crosses the content bottom."""
    return cursor_y + required_height > config.content_bottom
