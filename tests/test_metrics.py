"""Tests for typing metric calculations."""

import logging

import pytest

from core.metrics import (
    calculate_accuracy,
    calculate_net_wpm,
    calculate_progress,
    calculate_wpm,
    format_time,
    get_grade,
    get_performance_message,
    minutes_between,
    round_half_up,
)
from core.models import CompletionRecord


class TestRoundHalfUp:
    """Test rounding used by all metrics."""

    def test_half_rounds_up(self):
        """62.5 rounds to 63, unlike Python's banker's rounding."""
        assert round_half_up(62.5) == 63
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self):
        assert round_half_up(62.49) == 62

    def test_negative_half_rounds_away_from_zero(self):
        assert round_half_up(-2.5) == -3


class TestCalculateWPM:
    """Test calculate_wpm function."""

    def test_one_minute_exact(self):
        """250 characters (50 words) in one minute = 50 WPM."""
        assert calculate_wpm(250, 1.0) == 50

    def test_zero_minutes(self):
        """Zero elapsed time returns 0 instead of dividing by zero."""
        assert calculate_wpm(100, 0) == 0

    def test_zero_characters(self):
        assert calculate_wpm(0, 3.0) == 0

    def test_short_duration(self):
        """3 characters in 12 seconds: 0.6 words / 0.2 minutes = 3 WPM."""
        assert calculate_wpm(3, 0.2) == 3

    def test_result_is_rounded(self):
        """7 characters in one minute = 1.4 words -> 1 WPM."""
        assert calculate_wpm(7, 1.0) == 1


class TestCalculateAccuracy:
    """Test calculate_accuracy function."""

    def test_nothing_judged_is_perfect(self):
        assert calculate_accuracy(0, 0) == 100

    def test_no_errors(self):
        assert calculate_accuracy(10, 0) == 100

    def test_two_errors_in_ten(self):
        assert calculate_accuracy(10, 2) == 80

    def test_all_wrong(self):
        assert calculate_accuracy(1, 1) == 0

    def test_never_negative(self):
        """More errors than judged characters clamps to 0."""
        assert calculate_accuracy(1, 3) == 0

    def test_rounds_half_up(self):
        """7 of 8 correct = 87.5% -> 88."""
        assert calculate_accuracy(8, 1) == 88


class TestProgressAndNetWPM:
    """Test progress and net WPM helpers."""

    def test_progress(self):
        assert calculate_progress(0, 3) == 0
        assert calculate_progress(1, 3) == 33
        assert calculate_progress(2, 3) == 67
        assert calculate_progress(3, 3) == 100

    def test_progress_empty_total(self):
        assert calculate_progress(0, 0) == 0

    def test_net_wpm(self):
        assert calculate_net_wpm(50, 90) == 45
        assert calculate_net_wpm(45, 95) == 43  # 42.75
        assert calculate_net_wpm(60, 100) == 60


class TestGrade:
    """Test get_grade tier lookup."""

    def test_a_plus_boundary(self):
        assert get_grade(70, 95) == "A+"

    def test_just_below_a_plus_speed(self):
        """69 WPM at 95% misses A+ and lands in A."""
        assert get_grade(69, 95) == "A"

    def test_low_accuracy_is_f_regardless_of_speed(self):
        assert get_grade(60, 79) == "F"
        assert get_grade(150, 79) == "F"

    def test_b_and_c(self):
        assert get_grade(50, 85) == "B"
        assert get_grade(40, 80) == "C"

    def test_fast_but_only_c_accuracy(self):
        """High speed cannot lift an 80% accuracy past C."""
        assert get_grade(90, 80) == "C"

    def test_slow_is_d(self):
        assert get_grade(39, 100) == "D"


class TestPresentationHelpers:
    """Test results-screen helpers."""

    @pytest.mark.parametrize(
        "wpm,accuracy,expected",
        [
            (60, 95, "Outstanding!"),
            (45, 90, "Excellent!"),
            (30, 85, "Great Job!"),
            (10, 80, "Good Work!"),
            (100, 79, "Keep Practicing!"),
        ],
    )
    def test_performance_message(self, wpm, accuracy, expected):
        assert get_performance_message(wpm, accuracy) == expected

    def test_format_time(self):
        assert format_time(0) == "0s"
        assert format_time(42) == "42s"
        assert format_time(65) == "1m 5s"
        assert format_time(120) == "2m 0s"

    def test_minutes_between(self):
        assert minutes_between(1000, 31000) == pytest.approx(0.5)

    def test_minutes_between_negative_duration(self, caplog):
        """A clock running backwards is logged and treated as no time."""
        with caplog.at_level(logging.WARNING, logger="typetrainer.metrics"):
            assert minutes_between(5000, 1000) == 0.0
        assert "Negative duration" in caplog.text


class TestCompletionRecord:
    """Test derived fields of CompletionRecord."""

    def test_grade_and_net_wpm(self):
        record = CompletionRecord(
            wpm=72, accuracy=96, total_errors=3, time_in_seconds=40, characters_typed=240
        )
        assert record.grade == "A+"
        assert record.net_wpm == 69

    def test_dump_includes_derived_fields(self):
        record = CompletionRecord(
            wpm=30, accuracy=70, total_errors=9, time_in_seconds=60, characters_typed=30
        )
        data = record.model_dump()
        assert data["grade"] == "F"
        assert data["net_wpm"] == 21

    def test_record_is_immutable(self):
        record = CompletionRecord(
            wpm=30, accuracy=70, total_errors=9, time_in_seconds=60, characters_typed=30
        )
        with pytest.raises(Exception):
            record.wpm = 99
