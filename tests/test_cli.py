"""
Tests for the quiz-toolkit command line.

Test Coverage:
- export: PDF written, exit codes, template overrides
- templates: registry listing
- Layout settings file handling
"""

import json

import fitz
import pytest

from quiz_toolkit import cli
from quiz_toolkit.cli import LayoutSettingsError, build_parser, load_layout_config, main, template_overrides


@pytest.fixture
def quiz_file(tmp_path):
    """Quiz JSON in the exported container format."""
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps({"tests": [{
        "testName": "Capitals",
        "questions": [
            {
                "id": "q1",
                "question": "What is the capital of France?",
                "options": {"A": "Berlin", "B": "Paris", "C": "Rome", "D": "Madrid"},
                "correctAnswer": "B",
                "difficulty": "easy",
                "points": 2,
            },
            {
                "id": "q2",
                "question": "Rome is in Italy.",
                "questionType": "true-false",
                "correctAnswer": "A",
            },
        ],
    }]}), encoding="utf-8")
    return path


class TestParser:
    """Tests for build_parser() and template_overrides()."""

    def test_parse_when_hide_points_then_override_false(self):
        args = build_parser().parse_args(["export", "quiz.json", "--hide-points", "--show-difficulty"])

        assert template_overrides(args) == {"show_points": False, "show_difficulty": True}

    def test_parse_when_no_toggles_then_no_overrides(self):
        args = build_parser().parse_args(["export", "quiz.json"])

        assert template_overrides(args) == {}
        assert args.template == "STUDENT_QUIZ"

    def test_parse_when_show_and_hide_same_field_then_exit(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "quiz.json", "--show-answers", "--hide-answers"])

    def test_parse_when_bubble_style_then_override(self):
        args = build_parser().parse_args(["export", "quiz.json", "--bubble-style", "none"])

        assert template_overrides(args) == {"bubble_style": "none"}


class TestExportCommand:
    """Tests for ``quiz-toolkit export``."""

    def test_export_when_valid_file_then_pdf_written(self, quiz_file, tmp_path, capsys):
        # Arrange
        output = tmp_path / "out" / "key.pdf"

        # Act
        code = main(["export", str(quiz_file), "-t", "answer-key", "-o", str(output)])

        # Assert
        assert code == 0
        assert "1 pages, 2 questions, Teacher Answer Key" in capsys.readouterr().out
        with fitz.open(output) as pdf:
            text = pdf[0].get_text()
        assert "Capitals" in text
        assert "[EASY] (2 pts)" in text

    def test_export_when_hide_difficulty_then_not_in_pdf(self, quiz_file, tmp_path):
        output = tmp_path / "key.pdf"

        code = main(["export", str(quiz_file), "-t", "answer-key", "-o", str(output), "--hide-difficulty"])

        assert code == 0
        with fitz.open(output) as pdf:
            text = pdf[0].get_text()
        assert "[EASY]" not in text
        assert "(2 pts)" in text

    def test_export_when_delta_attributes_malformed_then_plain_text_exported(self, tmp_path):
        # Arrange
        quiz_path = tmp_path / "quiz.json"
        quiz_path.write_text(json.dumps({"testName": "Mixed", "questions": [{
            "question": "Largest planet?",
            "questionDelta": {"ops": [{"insert": "Largest planet?", "attributes": "bold"}]},
            "options": {"A": "Jupiter", "B": "Mars"},
            "optionsDelta": ["not", "an", "object"],
            "correctAnswer": "A",
        }]}), encoding="utf-8")
        output = tmp_path / "mixed.pdf"

        # Act
        code = main(["export", str(quiz_path), "-o", str(output)])

        # Assert
        assert code == 0
        with fitz.open(output) as pdf:
            text = pdf[0].get_text()
        assert "Largest planet?" in text
        assert "Jupiter" in text

    def test_export_when_quiz_invalid_then_exit_one(self, tmp_path, capsys):
        broken = tmp_path / "broken.json"
        broken.write_text("{nope", encoding="utf-8")

        code = main(["export", str(broken), "-o", str(tmp_path / "x.pdf")])

        assert code == 1
        assert "Error: Cannot read quiz file" in capsys.readouterr().err

    def test_export_when_unknown_template_then_exit_one(self, quiz_file, tmp_path, capsys):
        code = main(["export", str(quiz_file), "-t", "exam-paper", "-o", str(tmp_path / "x.pdf")])

        assert code == 1
        assert "Unknown template" in capsys.readouterr().err

    def test_export_when_test_index_out_of_range_then_exit_one(self, quiz_file, tmp_path):
        assert main(["export", str(quiz_file), "--test-index", "4", "-o", str(tmp_path / "x.pdf")]) == 1

    def test_export_when_layout_file_then_applied(self, quiz_file, tmp_path, monkeypatch):
        # Arrange
        layout = tmp_path / "layout.json"
        layout.write_text(json.dumps({"page_height": 100}), encoding="utf-8")
        seen = {}
        real_export = cli.export_quiz

        def spy(quiz, template, output_path, config):
            seen["config"] = config
            return real_export(quiz, template, output_path, config=config)

        monkeypatch.setattr(cli, "export_quiz", spy)

        # Act
        code = main(["export", str(quiz_file), "--layout", str(layout), "-o", str(tmp_path / "x.pdf")])

        # Assert
        assert code == 0
        assert seen["config"].page_height == 100


class TestLoadLayoutConfig:
    """Tests for load_layout_config()."""

    def test_load_when_none_then_defaults(self):
        assert load_layout_config(None).page_height == 297

    def test_load_when_unknown_key_then_error(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"gutter": 3}), encoding="utf-8")

        with pytest.raises(LayoutSettingsError, match="Invalid layout settings"):
            load_layout_config(path)

    def test_load_when_not_object_then_error(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(LayoutSettingsError, match="JSON object"):
            load_layout_config(path)

    def test_export_when_layout_invalid_then_exit_one(self, quiz_file, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"line_height": 0}), encoding="utf-8")

        assert main(["export", str(quiz_file), "--layout", str(path)]) == 1


class TestTemplatesCommand:
    """Tests for ``quiz-toolkit templates``."""

    def test_templates_when_run_then_all_listed(self, capsys):
        code = main(["templates"])

        out = capsys.readouterr().out
        assert code == 0
        for key in ("STUDENT_QUIZ", "ANSWER_KEY", "PRACTICE_SHEET"):
            assert key in out
        assert "Practice Worksheet" in out
