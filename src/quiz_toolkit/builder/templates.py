"""
Module: builder.templates

Purpose:
    Immutable document templates selecting which optional content the
    composer draws: answer highlighting, points, difficulty, bubble style.

Key Functions:
    - get_available_templates(): Read-only registry for UI listings
    - resolve_template(): Look up a template and apply field overrides

Key Classes:
    - Template: Frozen display-flag bundle
    - BubbleStyle: Marker drawn beside each option

Used By:
    - builder.layout.composer: Document composition
    - builder.layout.options: Bubble and highlight decisions
    - quiz_toolkit.cli: --template argument
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

logger = logging.getLogger(__name__)


class BubbleStyle(str, Enum):
    """
    Marker drawn next to an answer option.

    Attributes:
        CIRCLE: Outline circle
        FILLED: Outline circle, filled for the highlighted correct answer
        NONE: No marker (practice sheets use answer rules instead)
    """
    CIRCLE = "circle"
    FILLED = "filled"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Template:
    """
    Named bundle of display flags (immutable).

    Attributes:
        name: Printed under the document title
        description: Short text for template pickers
        show_answers: Highlight correct answers, omit the student-info block
        show_points: Print point totals and per-question points
        show_difficulty: Print per-question difficulty
        bubble_style: Option marker style
    """

    name: str
    description: str = ""
    show_answers: bool = False
    show_points: bool = False
    show_difficulty: bool = False
    bubble_style: BubbleStyle = BubbleStyle.CIRCLE

    def __post_init__(self) -> None:
        """Accept plain strings for bubble_style."""
        if not isinstance(self.bubble_style, BubbleStyle):
            object.__setattr__(self, "bubble_style", BubbleStyle(self.bubble_style))

    @property
    def draws_bubbles(self) -> bool:
        return self.bubble_style != BubbleStyle.NONE


STUDENT_QUIZ = Template(
    name="Student Quiz",
    description="Standard quiz format with A/B/C/D bubbles",
    show_answers=False,
    show_points=False,
    show_difficulty=False,
    bubble_style=BubbleStyle.CIRCLE,
)

ANSWER_KEY = Template(
    name="Teacher Answer Key",
    description="Same layout with correct answers highlighted",
    show_answers=True,
    show_points=True,
    show_difficulty=True,
    bubble_style=BubbleStyle.FILLED,
)

PRACTICE_SHEET = Template(
    name="Practice Worksheet",
    description="Questions with larger answer spaces",
    show_answers=False,
    show_points=False,
    show_difficulty=False,
    bubble_style=BubbleStyle.NONE,
)

_TEMPLATES: Mapping[str, Template] = MappingProxyType({
    "STUDENT_QUIZ": STUDENT_QUIZ,
    "ANSWER_KEY": ANSWER_KEY,
    "PRACTICE_SHEET": PRACTICE_SHEET,
})

_FIELD_NAMES = frozenset(f.name for f in fields(Template))


def get_available_templates() -> Mapping[str, Template]:
    """
    Registry of canonical templates, keyed STUDENT_QUIZ/ANSWER_KEY/PRACTICE_SHEET.

    The returned mapping is read-only.
    """
    return _TEMPLATES


def resolve_template(template: Union[str, Template], **overrides: Any) -> Template:
    """
    Look up a template and apply field-by-field overrides.

    Args:
        template: Template instance, registry key ("ANSWER_KEY") or slug
            ("answer-key")
        **overrides: Template fields to replace (None values are ignored)

    Returns:
        New Template (the registry is never modified)

    Raises:
        ValueError: Unknown template name or unknown override field

    Example:
        >>> resolve_template("student-quiz", show_points=True).show_points
        True
    """
    if isinstance(template, Template):
        base = template
    else:
        key = str(template).strip().upper().replace("-", "_").replace(" ", "_")
        if key not in _TEMPLATES:
            raise ValueError(
                f"Unknown template {template!r}; available: {', '.join(_TEMPLATES)}"
            )
        base = _TEMPLATES[key]

    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown template fields: {sorted(unknown)}")

    changes = {name: value for name, value in overrides.items() if value is not None}
    if not changes:
        return base

    logger.debug(f"Template {base.name!r} overrides: {changes}")
    return replace(base, **changes)
