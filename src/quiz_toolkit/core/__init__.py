"""
Quiz Toolkit Core Package

Shared data models and readers used by the builder.

1. **Immutable Data Models**
   - Question, Quiz and RichContent are frozen dataclasses

2. **One Rich Content Dispatch**
   - Delta, Html and PlainText are normalised in exactly one place
     (core.models.rich_content.normalize)

3. **Tolerant Reader**
   - core.utils.serialization accepts every field layout the quiz editor
     has exported, so the builder only ever sees Question objects
"""

from .models import (
    Delta,
    Html,
    PlainText,
    Question,
    QuestionType,
    Quiz,
    StyledRun,
    normalize,
)
from .utils.serialization import deserialize_quiz, load_quiz, QuizFormatError

__all__ = [
    "Delta",
    "Html",
    "PlainText",
    "Question",
    "QuestionType",
    "Quiz",
    "StyledRun",
    "normalize",
    "deserialize_quiz",
    "load_quiz",
    "QuizFormatError",
]
