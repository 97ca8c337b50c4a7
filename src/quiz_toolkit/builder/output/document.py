"""
Module: builder.output.document

Purpose:
    The finished multi-page document returned by the composer.
    Holds frozen pages of draw operations and replays them onto its
    backend to produce PDF output.

Key Classes:
    - Document: save(), to_bytes(), preview()

Dependencies:
    - builder.output.backend: DocumentBackend
    - builder.layout.models: Page

Used By:
    - builder.layout.composer: Constructs Documents
    - builder.controller: Saves Documents
"""

from __future__ import annotations

import io
import logging
import tempfile
import webbrowser
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from .backend import DocumentBackend

if TYPE_CHECKING:
    from quiz_toolkit.builder.layout.models import Page

logger = logging.getLogger(__name__)


def default_filename(today: Optional[date] = None) -> str:
    """Default export name, e.g. ``quiz-2026-10-19.pdf``."""
    return f"quiz-{(today or date.today()).isoformat()}.pdf"


@dataclass(frozen=True)
class Document:
    """
    Laid-out document (immutable).

    Attributes:
        pages: Finished pages with footers
        page_width: Page width in millimetres
        page_height: Page height in millimetres
        backend: Backend the pages are replayed onto
        title: PDF title metadata
        template_name: Template used for composition

    Example:
        >>> doc = composer.generate_document(quiz, ANSWER_KEY)
        >>> doc.page_count
        2
        >>> doc.save("answer-key.pdf")
    """

    pages: tuple[Page, ...]
    page_width: float
    page_height: float
    backend: DocumentBackend = field(repr=False, compare=False)
    title: str = ""
    template_name: str = ""

    @property
    def page_count(self) -> int:
        """Number of pages in the document."""
        return len(self.pages)

    def render(self, target: Union[str, io.BufferedIOBase]) -> None:
        """
        Replay every page onto the backend and write to target.

        Args:
            target: File path or writable binary stream
        """
        backend = self.backend
        backend.open(target, self.page_width, self.page_height, title=self.title)
        for page in self.pages:
            if page.index > 0:
                backend.new_page()
            for op in page.all_ops:
                op.draw(backend)
        backend.save()

    def save(self, filename: Union[str, Path, None] = None) -> Path:
        """
        Write the document as a PDF file.

        Args:
            filename: Output path (default ``quiz-<today>.pdf`` in the
                working directory)

        Returns:
            Path written

        Raises:
            OSError: If the file cannot be written
        """
        path = Path(filename) if filename else Path(default_filename())
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render(str(path))
        logger.info(f"Saved {self.page_count} pages to {path}")
        return path

    def to_bytes(self) -> bytes:
        """Render to an in-memory PDF."""
        buf = io.BytesIO()
        self.render(buf)
        return buf.getvalue()

    def preview(self) -> Path:
        """
        Write a temporary PDF and open it with the system viewer.

        Returns:
            Path of the temporary file (left for the viewer to read)
        """
        with tempfile.NamedTemporaryFile(prefix="quiz-preview-", suffix=".pdf", delete=False) as f:
            f.write(self.to_bytes())
            path = Path(f.name)
        logger.info(f"Opening preview {path}")
        webbrowser.open(path.as_uri())
        return path
