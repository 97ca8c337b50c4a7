"""
Core Models Package

Immutable data models shared by the reader and the layout engine.

All models in this package are frozen dataclasses. The layout engine
receives questions read-only and never mutates them; anything that
changes during composition lives in builder.layout.models.LayoutState.
"""

from .rich_content import (
    Delta,
    DeltaOp,
    Html,
    PlainText,
    RichContent,
    ScriptOffset,
    StyledRun,
    MalformedRichContentError,
    normalize,
    plain_text_of,
    extract_plain_text,
    rich_content_from_fields,
)
from .questions import (
    LETTERS,
    Question,
    QuestionType,
    Quiz,
    convert_internal_to_letter,
)

__all__ = [
    # Rich content
    "Delta",
    "DeltaOp",
    "Html",
    "PlainText",
    "RichContent",
    "ScriptOffset",
    "StyledRun",
    "MalformedRichContentError",
    "normalize",
    "plain_text_of",
    "extract_plain_text",
    "rich_content_from_fields",
    # Questions
    "LETTERS",
    "Question",
    "QuestionType",
    "Quiz",
    "convert_internal_to_letter",
]
