"""
Module: builder.layout.models

Purpose:
    Data models for page layout.
    Font state, the per-call layout state, recorded draw operations and
    finished pages.

Key Classes:
    - FontState: Immutable font selection (family, size, weight, style)
    - LayoutState: Mutable cursor/font state of one composition
    - TextOp / LineOp / CircleOp / ImageOp: Recorded draw operations
    - Page: Operations of one page plus footer and metadata

Dependencies:
    - dataclasses (std)
    - contextlib (std)

Used By:
    - builder.layout.context: Records operations onto pages
    - builder.output.document: Replays pages onto a backend
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterator, List, Union

if TYPE_CHECKING:
    from quiz_toolkit.builder.output.backend import DocumentBackend

NORMAL = "normal"
BOLD = "bold"
ITALIC = "italic"


@dataclass(frozen=True)
class FontState:
    """
    Font selection (immutable).

    Attributes:
        family: Base family name ("Helvetica", "Times", "Courier")
        size_pt: Size in points
        weight: "normal" or "bold"
        style: "normal" or "italic"

    Example:
        >>> FontState().styled(bold=True).is_bold
        True
    """

    family: str = "Helvetica"
    size_pt: float = 11.0
    weight: str = NORMAL
    style: str = NORMAL

    @property
    def is_bold(self) -> bool:
        return self.weight == BOLD

    @property
    def is_italic(self) -> bool:
        return self.style == ITALIC

    def styled(self, *, bold: bool = False, italic: bool = False) -> "FontState":
        """Copy with the given weight/style."""
        return replace(
            self,
            weight=BOLD if bold else NORMAL,
            style=ITALIC if italic else NORMAL,
        )

    def sized(self, size_pt: float) -> "FontState":
        """Copy at a different size."""
        return replace(self, size_pt=size_pt)


@dataclass
class LayoutState:
    """
    Cursor and font state of a single composition (mutable, call-scoped).

    Fonts are changed only through use_font(), which restores the previous
    state on exit so no renderer leaks its font into the next one.

    Attributes:
        page_index: Zero-based index of the page being filled
        cursor_y: Next free baseline on the current page
        font_state: Font currently selected
    """

    page_index: int = 0
    cursor_y: float = 0.0
    font_state: FontState = field(default_factory=FontState)
    _font_stack: List[FontState] = field(default_factory=list, repr=False)

    def push_font(self, font: FontState) -> None:
        self._font_stack.append(self.font_state)
        self.font_state = font

    def pop_font(self) -> FontState:
        """Restore the previously selected font and return it."""
        if not self._font_stack:
            raise RuntimeError("Font stack underflow")
        self.font_state = self._font_stack.pop()
        return self.font_state

    @property
    def font_depth(self) -> int:
        return len(self._font_stack)

    @contextmanager
    def use_font(self, font: FontState) -> Iterator[FontState]:
        """
        Select a font for the duration of a block.

        Example:
            >>> with state.use_font(state.font_state.styled(bold=True)):
            ...     draw_label()
        """
        self.push_font(font)
        try:
            yield font
        finally:
            self.pop_font()


# ─────────────────────────────────────────────────────────────────────────────
# Draw operations
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextOp:
    """Text drawn with its baseline at (x, y)."""

    x: float
    y: float
    text: str
    font: FontState
    underline: bool = False

    def draw(self, backend: "DocumentBackend") -> None:
        backend.draw_text(self)


@dataclass(frozen=True)
class LineOp:
    """Straight rule from (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.2

    def draw(self, backend: "DocumentBackend") -> None:
        backend.draw_line(self)


@dataclass(frozen=True)
class CircleOp:
    """Circle centred at (x, y); always stroked, optionally filled."""

    x: float
    y: float
    radius: float
    filled: bool = False

    def draw(self, backend: "DocumentBackend") -> None:
        backend.draw_circle(self)


@dataclass(frozen=True)
class ImageOp:
    """Image with its top-left corner at (x, y)."""

    x: float
    y: float
    width: float
    height: float
    data: bytes = field(repr=False)
    image_format: str = "jpeg"

    def draw(self, backend: "DocumentBackend") -> None:
        backend.draw_image(self)


DrawOp = Union[TextOp, LineOp, CircleOp, ImageOp]


@dataclass(frozen=True)
class Page:
    """
    Finished page (immutable).

    Attributes:
        index: Page number (0-indexed)
        ops: Body operations in draw order
        footer: Operations added by the finalize pass
        question_ids: Questions that start on this page
        height_used: Final cursor position minus the top margin

    Example:
        >>> page.number
        1
    """

    index: int
    ops: tuple[DrawOp, ...] = ()
    footer: tuple[DrawOp, ...] = ()
    question_ids: tuple[str, ...] = ()
    height_used: float = 0.0

    @property
    def number(self) -> int:
        """1-based page number."""
        return self.index + 1

    @property
    def all_ops(self) -> tuple[DrawOp, ...]:
        return self.ops + self.footer

    @property
    def text_ops(self) -> list[TextOp]:
        return [op for op in self.all_ops if isinstance(op, TextOp)]
