"""
Core Utilities Package

JSON reading helpers for quiz data.
"""

from .serialization import (
    deserialize_question,
    deserialize_quiz,
    load_quiz,
    get_image_extension,
    QuizFormatError,
)

__all__ = [
    "deserialize_question",
    "deserialize_quiz",
    "load_quiz",
    "get_image_extension",
    "QuizFormatError",
]
