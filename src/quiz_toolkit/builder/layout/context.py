"""
Module: builder.layout.context

Purpose:
    Per-composition drawing surface. Records draw operations onto the
    current page, measures text through the backend, and freezes pages
    when a new one starts.

Key Classes:
    - LayoutContext: Recorder + layout state for one composer call

Dependencies:
    - builder.layout.models: FontState, LayoutState, draw ops, Page
    - builder.layout.config: LayoutConfig
    - builder.output.backend: DocumentBackend (measurement only)

Used By:
    - builder.layout.text / images / options: Renderers draw through it
    - builder.layout.composer: Creates one per generate_document() call
"""

from __future__ import annotations

import logging
from typing import List, Optional

from quiz_toolkit.builder.output.backend import DocumentBackend

from .config import LayoutConfig
from .models import CircleOp, DrawOp, FontState, ImageOp, LayoutState, LineOp, Page, TextOp

logger = logging.getLogger(__name__)


class LayoutContext:
    """
    Drawing surface for a single composition.

    Operations go to the page being filled; new_page() freezes it into a
    Page and resets the cursor to the top margin. The context is discarded
    when composition returns.

    Attributes:
        backend: Backend used for text measurement
        config: Layout configuration
        state: Cursor/font state

    Example:
        >>> ctx = LayoutContext(backend, LayoutConfig())
        >>> ctx.draw_text(20, 30, "Hello")
        >>> ctx.new_page()
        >>> ctx.state.page_index
        1
    """

    def __init__(self, backend: DocumentBackend, config: LayoutConfig) -> None:
        self.backend = backend
        self.config = config
        self.base_font = FontState(family=config.font_family, size_pt=config.base_font_pt)
        self.state = LayoutState(cursor_y=config.margin_top, font_state=self.base_font)
        self._pages: List[Page] = []
        self._ops: List[DrawOp] = []
        self._question_ids: List[str] = []

    # ─────────────────────────────────────────────────────────────────────
    # Measurement
    # ─────────────────────────────────────────────────────────────────────

    @property
    def font(self) -> FontState:
        """Font currently selected."""
        return self.state.font_state

    def measure(self, text: str, font: Optional[FontState] = None) -> float:
        """Width of text in millimetres under font (default: current font)."""
        return self.backend.measure_text(text, font or self.font)

    # ─────────────────────────────────────────────────────────────────────
    # Recording
    # ─────────────────────────────────────────────────────────────────────

    def add(self, op: DrawOp) -> DrawOp:
        self._ops.append(op)
        return op

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font: Optional[FontState] = None,
        *,
        underline: bool = False,
    ) -> TextOp:
        return self.add(TextOp(x=x, y=y, text=text, font=font or self.font, underline=underline))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> LineOp:
        return self.add(LineOp(x1=x1, y1=y1, x2=x2, y2=y2))

    def draw_circle(self, x: float, y: float, radius: float, *, filled: bool = False) -> CircleOp:
        return self.add(CircleOp(x=x, y=y, radius=radius, filled=filled))

    def add_image(self, op: ImageOp) -> ImageOp:
        return self.add(op)

    def mark_question(self, question_id: str) -> None:
        """Record that a question starts on the current page."""
        self._question_ids.append(question_id)

    @property
    def current_ops(self) -> tuple[DrawOp, ...]:
        return tuple(self._ops)

    def checkpoint(self) -> tuple[int, int, int]:
        """Mark the current page, op count and question count for rollback()."""
        return self.state.page_index, len(self._ops), len(self._question_ids)

    def rollback(self, mark: tuple[int, int, int]) -> None:
        """
        Drop operations recorded since checkpoint().

        Raises:
            RuntimeError: If a page was started since the checkpoint
        """
        page_index, op_count, question_count = mark
        if page_index != self.state.page_index:
            raise RuntimeError("Cannot roll back across a page break")
        del self._ops[op_count:]
        del self._question_ids[question_count:]

    # ─────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────

    @property
    def at_page_top(self) -> bool:
        """True when nothing has advanced the cursor on this page."""
        return self.state.cursor_y <= self.config.margin_top

    def new_page(self) -> None:
        """Freeze the current page and move the cursor to the next page's top."""
        self._pages.append(self._freeze())
        self._ops = []
        self._question_ids = []
        self.state.page_index += 1
        self.state.cursor_y = self.config.margin_top
        logger.debug(f"Started page {self.state.page_index + 1}")

    def finish(self) -> list[Page]:
        """Freeze the last page and return every page in order."""
        pages = self._pages + [self._freeze()]
        self._pages = []
        self._ops = []
        self._question_ids = []
        return pages

    def _freeze(self) -> Page:
        return Page(
            index=self.state.page_index,
            ops=tuple(self._ops),
            question_ids=tuple(self._question_ids),
            height_used=max(0.0, self.state.cursor_y - self.config.margin_top),
        )
