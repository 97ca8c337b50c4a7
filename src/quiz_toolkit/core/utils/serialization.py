"""
Serialization Utilities

Reads quiz JSON as exported by the quiz editor into Question/Quiz models.

The editor has written several field layouts over time. The reader accepts
all of them so the builder only sees one model:

- Question content: ``questionDelta`` → ``questionHtml`` → ``question``
- Option content: ``optionsDelta[L]`` → ``optionsHtml[L]`` → ``options[L]``
  → legacy ``option1`` .. ``option6``
- Correct answer: a letter ("C") or the internal form ("option3")
- Container: ``{"tests": [...]}`` or a bare test object
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..models.questions import (
    LETTERS,
    Question,
    QuestionType,
    Quiz,
    convert_internal_to_letter,
)
from ..models.rich_content import RichContent, rich_content_from_fields

logger = logging.getLogger(__name__)

DEFAULT_OPTION_COUNT = 4
IMAGE_EXTENSIONS = ("jpg", "png", "gif", "webp")


class QuizFormatError(Exception):
    """Quiz JSON could not be read into models."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


# ─────────────────────────────────────────────────────────────────────────────
# Question Deserialization
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_question(data: dict[str, Any], index: int = 0) -> Question:
    """
    Build a Question from one exported question object.

    Args:
        data: Question dictionary from quiz JSON
        index: Zero-based index in the question list (used for defaults)

    Returns:
        Question instance

    Raises:
        QuizFormatError: If the data violates Question invariants
    """
    if not isinstance(data, dict):
        raise QuizFormatError(f"Question {index} must be an object", path=f"questions[{index}]")

    path = f"questions[{index}]"
    question_text = str(data.get("question") or "")
    question_rich = rich_content_from_fields(
        delta=data.get("questionDelta"),
        html=data.get("questionHtml"),
        text=question_text,
    )

    options = _read_options(data)

    raw_type = data.get("questionType") or QuestionType.MULTIPLE_CHOICE.value
    try:
        question_type = QuestionType(raw_type)
    except ValueError:
        raise QuizFormatError(f"Unknown questionType: {raw_type!r}", path=f"{path}.questionType")

    if question_type == QuestionType.TRUE_FALSE:
        option_count = 2
    else:
        option_count = _as_int(data.get("optionCount"), f"{path}.optionCount") or len(options) or DEFAULT_OPTION_COUNT

    try:
        return Question(
            id=str(data.get("id") or f"q{index + 1}"),
            question_text=question_text,
            question_rich=question_rich,
            options=options,
            correct_answer=convert_internal_to_letter(data.get("correctAnswer")),
            option_count=option_count,
            question_type=question_type,
            image=data.get("image") or None,
            difficulty=data.get("difficulty") or None,
            points=_as_int(data.get("points"), f"{path}.points") or 1,
            position=_as_int(data.get("position"), f"{path}.position") or index + 1,
            category=data.get("category") or None,
        )
    except ValueError as e:
        raise QuizFormatError(f"Invalid question {index}: {e}", path=path) from e


def _read_options(data: dict[str, Any]) -> dict[str, RichContent]:
    """Collect option content per letter from every known field layout."""
    deltas = _as_mapping(data.get("optionsDelta"), "optionsDelta")
    htmls = _as_mapping(data.get("optionsHtml"), "optionsHtml")
    texts = _as_mapping(data.get("options"), "options")

    options: dict[str, RichContent] = {}
    for i, letter in enumerate(LETTERS):
        text = texts.get(letter) or data.get(f"option{i + 1}") or ""
        delta = deltas.get(letter)
        html = htmls.get(letter)
        if not (delta or html or str(text).strip()):
            continue
        options[letter] = rich_content_from_fields(delta=delta, html=html, text=str(text))
    return options


def _as_mapping(value: Any, field_name: str) -> dict[str, Any]:
    """Per-letter option container; anything but an object counts as empty."""
    if value is None or isinstance(value, dict):
        return value or {}
    logger.warning(f"Ignoring {field_name}: expected an object, got {type(value).__name__}")
    return {}


def _as_int(value: Any, path: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise QuizFormatError(f"Expected an integer, got {value!r}", path=path)


# ─────────────────────────────────────────────────────────────────────────────
# Quiz Deserialization
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_quiz(data: dict[str, Any], *, test_index: int = 0) -> Quiz:
    """
    Build a Quiz from exported JSON.

    Args:
        data: Either ``{"tests": [...]}`` or a single test object with
            ``testName`` and ``questions``
        test_index: Which test to read from a ``tests`` list

    Returns:
        Quiz instance

    Raises:
        QuizFormatError: If the structure is not a quiz

    Example:
        >>> quiz = deserialize_quiz({"testName": "Demo", "questions": []})
        >>> quiz.question_count
        0
    """
    if not isinstance(data, dict):
        raise QuizFormatError("Quiz JSON must be an object")

    if "tests" in data:
        tests = data["tests"]
        if not isinstance(tests, list) or not tests:
            raise QuizFormatError("'tests' must be a non-empty list", path="tests")
        if not (0 <= test_index < len(tests)):
            raise QuizFormatError(
                f"test_index {test_index} out of range (file has {len(tests)} tests)",
                path="tests",
            )
        data = tests[test_index]
        if not isinstance(data, dict):
            raise QuizFormatError(f"Test {test_index} must be an object", path=f"tests[{test_index}]")

    raw_questions = data.get("questions")
    if raw_questions is None:
        raw_questions = []
    if not isinstance(raw_questions, list):
        raise QuizFormatError("'questions' must be a list", path="questions")

    questions = tuple(deserialize_question(q, i) for i, q in enumerate(raw_questions))
    test_id = data.get("testID") or data.get("testId")

    logger.debug(f"Read {len(questions)} questions for {data.get('testName')!r}")

    return Quiz(
        test_name=data.get("testName") or "Quiz",
        questions=questions,
        test_id=str(test_id) if test_id else None,
    )


def load_quiz(path: Path, *, test_index: int = 0) -> Quiz:
    """
    Read a quiz JSON file.

    Raises:
        QuizFormatError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise QuizFormatError(f"Cannot read quiz file {path}: {e}") from e
    return deserialize_quiz(data, test_index=test_index)


def get_image_extension(image_ref: Optional[str]) -> str:
    """
    Image file extension for a path or data URI.

    ``jpeg`` is reported as ``jpg``; unknown extensions fall back to ``jpg``.

    Example:
        >>> get_image_extension("data:image/png;base64,iVBOR...")
        'png'
        >>> get_image_extension("images/q1_image.JPEG")
        'jpg'
    """
    if not image_ref:
        return "jpg"
    if image_ref.startswith("data:image/"):
        ext = image_ref[len("data:image/"):].split(";", 1)[0].split(",", 1)[0].lower()
    else:
        ext = image_ref.rsplit(".", 1)[-1].lower() if "." in image_ref else ""
    if ext == "jpeg":
        ext = "jpg"
    return ext if ext in IMAGE_EXTENSIONS else "jpg"
