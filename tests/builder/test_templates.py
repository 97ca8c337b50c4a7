"""
Tests for builder.templates

Test Coverage:
- Canonical template flags
- Read-only registry
- resolve_template(): names, slugs, overrides, errors
"""

import pytest

from quiz_toolkit.builder.templates import (
    ANSWER_KEY,
    PRACTICE_SHEET,
    STUDENT_QUIZ,
    BubbleStyle,
    Template,
    get_available_templates,
    resolve_template,
)


class TestCanonicalTemplates:
    """Flags of the three built-in templates."""

    def test_student_quiz_when_inspected_then_hides_everything(self):
        assert STUDENT_QUIZ.name == "Student Quiz"
        assert not (STUDENT_QUIZ.show_answers or STUDENT_QUIZ.show_points or STUDENT_QUIZ.show_difficulty)
        assert STUDENT_QUIZ.bubble_style == BubbleStyle.CIRCLE

    def test_answer_key_when_inspected_then_shows_everything(self):
        assert ANSWER_KEY.name == "Teacher Answer Key"
        assert ANSWER_KEY.show_answers and ANSWER_KEY.show_points and ANSWER_KEY.show_difficulty
        assert ANSWER_KEY.bubble_style == BubbleStyle.FILLED

    def test_practice_sheet_when_inspected_then_no_bubbles(self):
        assert PRACTICE_SHEET.name == "Practice Worksheet"
        assert PRACTICE_SHEET.bubble_style == BubbleStyle.NONE
        assert PRACTICE_SHEET.draws_bubbles is False


class TestRegistry:
    """Tests for get_available_templates()."""

    def test_registry_when_listed_then_three_keys(self):
        assert list(get_available_templates()) == ["STUDENT_QUIZ", "ANSWER_KEY", "PRACTICE_SHEET"]

    def test_registry_when_modified_then_raises(self):
        registry = get_available_templates()

        with pytest.raises(TypeError):
            registry["CUSTOM"] = STUDENT_QUIZ


class TestResolveTemplate:
    """Tests for resolve_template()."""

    @pytest.mark.parametrize("name", ["ANSWER_KEY", "answer-key", "Answer Key", " answer_key "])
    def test_resolve_when_key_or_slug_then_answer_key(self, name):
        assert resolve_template(name) is ANSWER_KEY

    def test_resolve_when_overrides_then_new_template(self):
        # Act
        custom = resolve_template("student-quiz", show_points=True, bubble_style="filled")

        # Assert
        assert custom.show_points is True
        assert custom.bubble_style == BubbleStyle.FILLED
        assert custom.name == "Student Quiz"
        assert STUDENT_QUIZ.show_points is False

    def test_resolve_when_none_override_then_ignored(self):
        assert resolve_template(ANSWER_KEY, show_points=None) is ANSWER_KEY

    def test_resolve_when_template_instance_then_overrides_applied(self):
        base = Template(name="Custom", bubble_style="none")

        resolved = resolve_template(base, show_answers=True)

        assert resolved.show_answers is True
        assert resolved.bubble_style == BubbleStyle.NONE

    def test_resolve_when_unknown_name_then_raises(self):
        with pytest.raises(ValueError, match="Unknown template 'exam'"):
            resolve_template("exam")

    def test_resolve_when_unknown_field_then_raises(self):
        with pytest.raises(ValueError, match="Unknown template fields"):
            resolve_template(STUDENT_QUIZ, colour="red")

    def test_resolve_when_bad_bubble_style_then_raises(self):
        with pytest.raises(ValueError):
            resolve_template(STUDENT_QUIZ, bubble_style="square")
