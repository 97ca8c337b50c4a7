import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import quiz_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from quiz_toolkit.builder.layout.config import LayoutConfig
from quiz_toolkit.builder.layout.context import LayoutContext
from quiz_toolkit.builder.output.backend import DocumentBackend
from quiz_toolkit.core.models.questions import Question, QuestionType, Quiz
from quiz_toolkit.core.models.rich_content import PlainText


class FixedWidthBackend(DocumentBackend):
    """
    Deterministic backend for layout tests.

    Every character measures char_width millimetres regardless of font.
    Drawing calls are recorded in ``calls``; save() writes a small marker
    so Document.save()/to_bytes() produce output.
    """

    def __init__(self, char_width: float = 2.0):
        self.char_width = char_width
        self.calls = []
        self._target = None

    def measure_text(self, text, font):
        return len(text) * self.char_width

    def open(self, target, page_width, page_height, *, title=""):
        self._target = target
        self.calls.append(("open", page_width, page_height, title))

    def new_page(self):
        self.calls.append(("new_page",))

    def draw_text(self, op):
        self.calls.append(("text", op))

    def draw_line(self, op):
        self.calls.append(("line", op))

    def draw_circle(self, op):
        self.calls.append(("circle", op))

    def draw_image(self, op):
        self.calls.append(("image", op))

    def save(self):
        self.calls.append(("save",))
        data = b"%PDF-FAKE\n"
        if hasattr(self._target, "write"):
            self._target.write(data)
        else:
            Path(self._target).write_bytes(data)
        self._target = None

    def call_names(self):
        return [call[0] for call in self.calls]


def build_data_uri(width: int, height: int, fmt: str = "PNG") -> str:
    """Encode a blank Pillow image as a data URI."""
    img = Image.new("RGB", (width, height), color="white")
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    mime = "jpeg" if fmt.upper() == "JPEG" else fmt.lower()
    return f"data:image/{mime};base64,{base64.b64encode(buf.getvalue()).decode('ascii')}"


def build_question(
    qid: str = "q1",
    text: str = "What is the capital of France?",
    option_count: int = 4,
    correct: str = "A",
    position: int = 1,
    **kwargs,
) -> Question:
    """Multiple-choice question with options "Option A".."Option F"."""
    options = kwargs.pop("options", None)
    if options is None:
        letters = "ABCDEF"[:option_count]
        options = {letter: PlainText(f"Option {letter}") for letter in letters}
    return Question(
        id=qid,
        question_text=text,
        options=options,
        correct_answer=correct,
        option_count=option_count,
        position=position,
        **kwargs,
    )


def build_true_false(qid: str = "tf1", correct: str = "A", position: int = 1, **kwargs) -> Question:
    return Question(
        id=qid,
        question_text="The sky is blue.",
        options={"A": PlainText("Yes"), "B": PlainText("No")},
        correct_answer=correct,
        option_count=2,
        question_type=QuestionType.TRUE_FALSE,
        position=position,
        **kwargs,
    )


# Common test fixtures
@pytest.fixture
def backend():
    """Fixed-width recording backend."""
    return FixedWidthBackend()


@pytest.fixture
def config():
    """Default layout configuration."""
    return LayoutConfig()


@pytest.fixture
def ctx(backend, config):
    """Fresh layout context on the fixed-width backend."""
    return LayoutContext(backend, config)


@pytest.fixture
def sample_quiz():
    """Three-question quiz with mixed types."""
    return Quiz(
        test_name="Geography",
        questions=(
            build_question("q1", position=1, difficulty="easy", points=2),
            build_true_false("q2", correct="B", position=2),
            build_question("q3", text="Pick the largest ocean.", correct="C", position=3),
        ),
    )


@pytest.fixture
def png_data_uri():
    """200x100 PNG data URI."""
    return build_data_uri(200, 100)


@pytest.fixture
def make_question():
    """Factory for multiple-choice questions."""
    return build_question


@pytest.fixture
def make_true_false():
    """Factory for true/false questions."""
    return build_true_false


@pytest.fixture
def make_data_uri():
    """Factory for Pillow-generated image data URIs."""
    return build_data_uri
