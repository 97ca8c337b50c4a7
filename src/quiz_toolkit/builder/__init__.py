"""
Module: builder

Purpose:
    Quiz document building pipeline.
    Resolves a template, lays out questions onto pages and writes PDF.

Key Functions:
    - export_quiz(): Compose and save a quiz PDF
    - get_available_templates(): Template registry for pickers
    - resolve_template(): Template lookup with field overrides

Key Classes:
    - Template: Display flags
    - ExportResult: Export summary
    - ExportError: Export failure

Dependencies:
    - builder.layout: Composition
    - builder.output: PDF output

Used By:
    - cli: quiz-toolkit command
"""

from .templates import (
    ANSWER_KEY,
    PRACTICE_SHEET,
    STUDENT_QUIZ,
    BubbleStyle,
    Template,
    get_available_templates,
    resolve_template,
)
from .controller import export_quiz, ExportResult, ExportError

__all__ = [
    # Templates
    "Template",
    "BubbleStyle",
    "STUDENT_QUIZ",
    "ANSWER_KEY",
    "PRACTICE_SHEET",
    "get_available_templates",
    "resolve_template",
    # Export
    "export_quiz",
    "ExportResult",
    "ExportError",
]
