"""
Tests for builder.layout.estimator

Test Coverage:
- fixed_line_overhead() per question type and template
- estimate_question_height() heuristic
- needs_new_page() boundary
"""

import pytest

from quiz_toolkit.builder.layout.config import LayoutConfig
from quiz_toolkit.builder.layout.estimator import (
    estimate_question_height,
    fixed_line_overhead,
    needs_new_page,
)
from quiz_toolkit.builder.templates import ANSWER_KEY, PRACTICE_SHEET, STUDENT_QUIZ


class TestFixedLineOverhead:
    """Tests for fixed_line_overhead()."""

    @pytest.mark.parametrize("count", [2, 4, 6])
    def test_overhead_when_multiple_choice_then_header_plus_options(self, make_question, config, count):
        question = make_question(option_count=count)

        assert fixed_line_overhead(question, STUDENT_QUIZ, config) == 1 + count

    def test_overhead_when_true_false_then_three_lines(self, make_true_false, config):
        assert fixed_line_overhead(make_true_false(), ANSWER_KEY, config) == 3

    def test_overhead_when_practice_sheet_then_answer_rules_in_lines(self, make_question, config):
        # 3 rules x 8mm = 24mm = 4 lines of 6mm
        assert fixed_line_overhead(make_question(), PRACTICE_SHEET, config) == pytest.approx(5)

    def test_overhead_when_practice_sheet_true_false_then_pair(self, make_true_false, config):
        assert fixed_line_overhead(make_true_false(), PRACTICE_SHEET, config) == 3


class TestEstimateQuestionHeight:
    """Tests for estimate_question_height()."""

    def test_estimate_when_short_question_then_one_text_line(self, make_question, config):
        # Arrange: 30 characters, 4 options
        question = make_question(text="What is the capital of France?")

        # Act
        height = estimate_question_height(question, STUDENT_QUIZ, config)

        # Assert: (1 text + 1 header + 4 options) * 6 + 10
        assert height == pytest.approx(46)

    def test_estimate_when_long_text_then_more_lines(self, make_question, config):
        question = make_question(text="x" * 170)

        height = estimate_question_height(question, STUDENT_QUIZ, config)

        assert height == pytest.approx((2 + 5) * config.line_height + config.question_spacing)

    def test_estimate_when_image_then_reservation_added(self, make_question, config, png_data_uri):
        without = estimate_question_height(make_question(), STUDENT_QUIZ, config)
        with_image = estimate_question_height(make_question(image=png_data_uri), STUDENT_QUIZ, config)

        assert with_image - without == pytest.approx(config.image_reservation)

    def test_estimate_when_chars_per_line_smaller_then_taller(self, make_question):
        question = make_question(text="y" * 100)
        narrow = LayoutConfig(chars_per_line=20)

        assert estimate_question_height(question, STUDENT_QUIZ, narrow) == pytest.approx((5 + 5) * 6 + 10)


class TestNeedsNewPage:
    """Tests for needs_new_page()."""

    def test_needs_new_page_when_one_mm_left_and_taller_then_true(self, config):
        cursor_y = config.page_height - config.margin_bottom - 1

        assert needs_new_page(cursor_y, 1.5, config)

    def test_needs_new_page_when_fits_exactly_then_false(self, config):
        assert not needs_new_page(config.content_bottom - 40, 40, config)

    def test_needs_new_page_when_room_then_false(self, config):
        assert not needs_new_page(config.margin_top, 100, config)
