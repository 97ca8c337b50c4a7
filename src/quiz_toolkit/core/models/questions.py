"""
Module: questions

Purpose:
    Provides the Question and Quiz dataclasses - the read-only inputs of the
    layout engine. A Question carries its rich question content, up to six
    lettered options, the correct letter and display metadata.

Key Functions:
    - Question.active_letters: Letters enabled by option_count
    - Question.plain_text: Plain-text extraction of the question content
    - Quiz.ordered_questions: Questions sorted by position
    - convert_internal_to_letter(): "option3" -> "C"

Dependencies:
    - dataclasses (std)
    - functools (std)
    - .rich_content

Used By:
    - core.utils.serialization: JSON reader
    - builder.layout: Estimator, option renderer, composer

Design Notes:
    Questions are frozen: the layout engine never mutates caller data.
    Invariants are checked once at construction so renderers can trust them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Dict, Optional, Tuple

from .rich_content import EMPTY_CONTENT, RichContent, PlainText, extract_plain_text

LETTERS: Tuple[str, ...] = ("A", "B", "C", "D", "E", "F")
MIN_OPTIONS = 2
MAX_OPTIONS = len(LETTERS)

_INTERNAL_TO_LETTER = {f"option{i + 1}": letter for i, letter in enumerate(LETTERS)}


class QuestionType(str, Enum):
    """Kind of question."""
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"

    def __str__(self) -> str:
        return self.value


def convert_internal_to_letter(answer: Optional[str]) -> str:
    """
    Convert an answer reference to its letter.

    Accepts both the letter form ("C") and the editor's internal form
    ("option3"). Unknown values map to "A", matching the export tool.

    Example:
        >>> convert_internal_to_letter("option2")
        'B'
        >>> convert_internal_to_letter("D")
        'D'
    """
    if answer in LETTERS:
        return answer
    return _INTERNAL_TO_LETTER.get(answer or "", "A")


@dataclass(frozen=True)
class Question:
    """
    Single quiz question (immutable).

    Attributes:
        id: Unique identifier like "q1"
        question_text: Plain question text as stored by the editor
        question_rich: Rich question content (Delta, Html or PlainText)
        options: Mapping of letter -> option content
        correct_answer: Letter of the correct option
        option_count: Number of active options (2-6)
        question_type: Multiple choice or true/false
        image: Data URI or relative path, or None
        difficulty: Free-form difficulty label ("easy", "medium", ...)
        points: Points awarded
        position: 1-based ordering key
        category: Optional category label

    Invariants:
        - 2 <= option_count <= 6
        - multiple choice: correct_answer is one of the provided option letters
        - true/false: correct_answer is "A" (True) or "B" (False)

    Example:
        >>> q = Question(
        ...     id="q1",
        ...     question_text="2 + 2 = ?",
        ...     options={"A": PlainText("3"), "B": PlainText("4")},
        ...     correct_answer="B",
        ...     option_count=2,
        ... )
        >>> q.active_letters
        ('A', 'B')
    """

    id: str
    question_text: str
    options: Dict[str, RichContent] = field(default_factory=dict)
    correct_answer: str = "A"
    option_count: int = 4
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    question_rich: Optional[RichContent] = None
    image: Optional[str] = None
    difficulty: Optional[str] = None
    points: int = 1
    position: int = 0
    category: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not (MIN_OPTIONS <= self.option_count <= MAX_OPTIONS):
            raise ValueError(
                f"option_count must be {MIN_OPTIONS}-{MAX_OPTIONS}: {self.option_count}"
            )
        unknown = [letter for letter in self.options if letter not in LETTERS]
        if unknown:
            raise ValueError(f"Unknown option letters: {unknown}")
        if self.is_true_false:
            if self.correct_answer not in ("A", "B"):
                raise ValueError(
                    f"true/false correct_answer must be A or B: {self.correct_answer!r}"
                )
        elif self.correct_answer not in self.options:
            raise ValueError(
                f"correct_answer {self.correct_answer!r} not in options {sorted(self.options)}"
            )
        if self.question_rich is None:
            object.__setattr__(self, "question_rich", PlainText(self.question_text))

    @property
    def is_true_false(self) -> bool:
        """True when the question always renders as a True/False pair."""
        return self.question_type == QuestionType.TRUE_FALSE

    @property
    def active_letters(self) -> Tuple[str, ...]:
        """Letters enabled by option_count, in order."""
        return LETTERS[:self.option_count]

    @property
    def has_image(self) -> bool:
        return bool(self.image)

    def option(self, letter: str) -> RichContent:
        """Content for a letter (empty when the letter has no stored text)."""
        return self.options.get(letter, EMPTY_CONTENT)

    @cached_property
    def plain_text(self) -> str:
        """Plain text of the question, falling back to question_text."""
        return extract_plain_text(self.question_rich) or self.question_text.strip()


@dataclass(frozen=True)
class Quiz:
    """
    Question set supplied for export (immutable).

    Attributes:
        test_name: Title printed in the document header
        questions: Questions in stored order
        test_id: Optional identifier from the editor
    """

    test_name: str
    questions: Tuple[Question, ...] = ()
    test_id: Optional[str] = None

    @cached_property
    def ordered_questions(self) -> Tuple[Question, ...]:
        """Questions sorted by position (stable for equal positions)."""
        return tuple(sorted(self.questions, key=lambda q: q.position))

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def total_points(self) -> int:
        """Sum of points; a question without points counts as 1."""
        return sum(q.points or 1 for q in self.questions)
