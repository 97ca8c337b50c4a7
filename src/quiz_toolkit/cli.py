"""
Module: cli

Purpose:
    Command-line entry point (``quiz-toolkit``).

Commands:
    export     Compose a quiz JSON file into a PDF
    templates  List the available templates

Example:
    quiz-toolkit export quiz.json -t answer-key -o out/key.pdf --hide-points
    quiz-toolkit templates

Exit status is 0 on success and 1 when the quiz, layout settings or
backend are unusable or the PDF cannot be written.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from quiz_toolkit import __version__
from quiz_toolkit.builder.controller import ExportError, export_quiz
from quiz_toolkit.builder.layout.config import LayoutConfig
from quiz_toolkit.builder.output.backend import ConfigurationError
from quiz_toolkit.builder.templates import BubbleStyle, get_available_templates, resolve_template
from quiz_toolkit.core.utils.serialization import QuizFormatError, load_quiz

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

# (flag stem, Template field)
_TOGGLES = (
    ("answers", "show_answers"),
    ("points", "show_points"),
    ("difficulty", "show_difficulty"),
)


class LayoutSettingsError(Exception):
    """Layout settings file could not be read."""
    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz-toolkit",
        description="Lay out quizzes as printable PDF documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export a quiz JSON file to PDF")
    export.add_argument("quiz", type=Path, help="Quiz JSON file")
    export.add_argument(
        "-t", "--template",
        default="STUDENT_QUIZ",
        help="Template name or slug (default: STUDENT_QUIZ)",
    )
    export.add_argument("-o", "--output", type=Path, help="Output PDF (default: quiz-<date>.pdf)")
    export.add_argument(
        "--test-index",
        type=int,
        default=0,
        help="Test to export from a multi-test file (default: 0)",
    )
    export.add_argument("--layout", type=Path, help="JSON file of LayoutConfig overrides")
    for stem, field_name in _TOGGLES:
        group = export.add_mutually_exclusive_group()
        group.add_argument(
            f"--show-{stem}", dest=field_name, action="store_const", const=True,
            help=f"Force {stem} on",
        )
        group.add_argument(
            f"--hide-{stem}", dest=field_name, action="store_const", const=False,
            help=f"Force {stem} off",
        )
    export.add_argument(
        "--bubble-style",
        choices=[style.value for style in BubbleStyle],
        help="Override the option marker style",
    )
    export.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    templates = subparsers.add_parser("templates", help="List available templates")
    templates.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser


def load_layout_config(path: Optional[Path]) -> LayoutConfig:
    """
    Read LayoutConfig overrides from a JSON object file.

    Raises:
        LayoutSettingsError: Unreadable file or invalid settings
    """
    if path is None:
        return LayoutConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutSettingsError(f"Cannot read layout settings {path}: {e}") from e
    if not isinstance(data, dict):
        raise LayoutSettingsError(f"Layout settings must be a JSON object: {path}")
    try:
        return LayoutConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise LayoutSettingsError(f"Invalid layout settings in {path}: {e}") from e


def template_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Template field overrides given on the command line."""
    overrides: Dict[str, Any] = {field_name: getattr(args, field_name) for _, field_name in _TOGGLES}
    overrides["bubble_style"] = args.bubble_style
    return {key: value for key, value in overrides.items() if value is not None}


def run_export(args: argparse.Namespace) -> int:
    try:
        template = resolve_template(args.template, **template_overrides(args))
        config = load_layout_config(args.layout)
        quiz = load_quiz(args.quiz, test_index=args.test_index)
        result = export_quiz(quiz, template, args.output, config=config)
    except (QuizFormatError, LayoutSettingsError, ConfigurationError, ExportError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(
        f"Wrote {result.pdf_path} ({result.page_count} pages, "
        f"{result.question_count} questions, {result.template_name})"
    )
    return 0


def run_templates(args: argparse.Namespace) -> int:
    for key, template in get_available_templates().items():
        print(f"{key:<16} {template.name:<20} {template.description}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    if args.command == "export":
        return run_export(args)
    return run_templates(args)


if __name__ == "__main__":
    sys.exit(main())
