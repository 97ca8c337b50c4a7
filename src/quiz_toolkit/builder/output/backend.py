"""
Module: builder.output.backend

Purpose:
    Capability interface for the document-rendering backend.
    The composer only measures text through it; a Document replays its
    recorded operations onto it when saved.

Key Classes:
    - DocumentBackend: Abstract backend interface
    - ConfigurationError: No usable backend

Key Functions:
    - get_default_backend(): ReportLab backend, or ConfigurationError

Used By:
    - builder.layout.composer: Measurement during layout
    - builder.output.document: Replay on save
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, BinaryIO, Union

if TYPE_CHECKING:
    from quiz_toolkit.builder.layout.models import (
        CircleOp,
        FontState,
        ImageOp,
        LineOp,
        TextOp,
    )

Target = Union[str, BinaryIO]


class ConfigurationError(Exception):
    """No usable document-rendering backend is available."""
    pass


class DocumentBackend(ABC):
    """
    Abstract document-rendering backend.

    Coordinates are millimetres from the top-left corner of the page.
    Output lifecycle: open() → draw_* ... → new_page() → draw_* ... → save().
    """

    @abstractmethod
    def measure_text(self, text: str, font: "FontState") -> float:
        """
        Width of text in millimetres.

        Args:
            text: Text to measure
            font: Font it would be drawn with
        """

    @abstractmethod
    def open(
        self,
        target: Target,
        page_width: float,
        page_height: float,
        *,
        title: str = "",
    ) -> None:
        """Start a new output on a file path or binary stream."""

    @abstractmethod
    def new_page(self) -> None:
        """Finish the current page and start the next one."""

    @abstractmethod
    def draw_text(self, op: "TextOp") -> None:
        """Draw a text operation."""

    @abstractmethod
    def draw_line(self, op: "LineOp") -> None:
        """Draw a line operation."""

    @abstractmethod
    def draw_circle(self, op: "CircleOp") -> None:
        """Draw a circle operation."""

    @abstractmethod
    def draw_image(self, op: "ImageOp") -> None:
        """Draw an image operation."""

    @abstractmethod
    def save(self) -> None:
        """Finish the last page and flush the output."""


def get_default_backend() -> DocumentBackend:
    """
    Create the ReportLab backend.

    Raises:
        ConfigurationError: If reportlab cannot be imported
    """
    try:
        from .reportlab_backend import ReportLabBackend
    except ImportError as e:
        raise ConfigurationError(
            f"PDF backend unavailable: {e}. Install reportlab to export documents."
        ) from e
    return ReportLabBackend()
