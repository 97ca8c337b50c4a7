"""
Module: builder.controller

Purpose:
    Orchestrate a quiz export.
    Resolve template → Compose → Save PDF

Key Functions:
    - export_quiz(): Main entry point for writing a quiz PDF

Key Classes:
    - ExportResult: Export summary
    - ExportError: Exception for export failures

Dependencies:
    - builder.layout: DocumentComposer
    - builder.output: DocumentBackend, Document
    - builder.templates: Template registry

Used By:
    - cli: quiz-toolkit export
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from quiz_toolkit.core.models.questions import Quiz

from .layout.composer import DocumentComposer
from .layout.config import LayoutConfig
from .output.backend import DocumentBackend
from .templates import Template, resolve_template

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Error while writing an exported document."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Export summary (immutable).

    Attributes:
        pdf_path: Path of the written PDF
        page_count: Number of pages
        template_name: Display name of the template used
        question_count: Number of questions laid out
        duration_s: Wall-clock time of compose + save

    Example:
        >>> result = export_quiz(quiz, "answer-key", Path("out/key.pdf"))
        >>> print(f"Wrote {result.page_count} pages to {result.pdf_path}")
    """
    pdf_path: Path
    page_count: int
    template_name: str
    question_count: int
    duration_s: float


def export_quiz(
    quiz: Quiz,
    template: Union[str, Template],
    output_path: Union[str, Path, None] = None,
    *,
    backend: Optional[DocumentBackend] = None,
    config: Optional[LayoutConfig] = None,
) -> ExportResult:
    """
    Compose a quiz and save it as a PDF.

    Args:
        quiz: Quiz to export
        template: Template or registry name
        output_path: Destination (default ``quiz-<today>.pdf``)
        backend: Backend to compose and render with (default: ReportLab)
        config: Layout configuration

    Returns:
        ExportResult with path and counts

    Raises:
        ConfigurationError: No usable backend
        ValueError: Unknown template name
        ExportError: The PDF could not be written
    """
    start_time = time.perf_counter()
    template = resolve_template(template)
    logger.info(f"Exporting '{quiz.test_name}' as {template.name}")

    composer = DocumentComposer(backend, config)
    document = composer.generate_document(quiz, template)

    try:
        path = document.save(output_path)
    except OSError as e:
        raise ExportError(f"Failed to write PDF: {e}") from e

    duration = time.perf_counter() - start_time
    logger.info(f"Export complete in {duration:.2f}s: {document.page_count} pages → {path}")

    return ExportResult(
        pdf_path=path,
        page_count=document.page_count,
        template_name=template.name,
        question_count=quiz.question_count,
        duration_s=duration,
    )
