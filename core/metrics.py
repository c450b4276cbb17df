"""Typing metric calculations.

Every function here is pure and total: degenerate inputs (zero time, zero
characters) map to well-defined values instead of raising.
"""

import logging
import math

log = logging.getLogger("typetrainer.metrics")

CHARS_PER_WORD = 5


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's built-in round() uses banker's rounding, which would turn
    62.5 into 62; typing scores are conventionally rounded up.
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def calculate_wpm(characters: int, minutes: float) -> int:
    """Calculate words per minute.

    Args:
        characters: Characters judged (correct or not)
        minutes: Elapsed time in minutes

    Returns:
        Rounded WPM, or 0 if no time has elapsed
    """
    if minutes <= 0:
        return 0

    words = characters / CHARS_PER_WORD
    return round_half_up(words / minutes)


def calculate_accuracy(characters_judged: int, errors: int) -> int:
    """Calculate accuracy percentage.

    Args:
        characters_judged: Number of characters evaluated so far
        errors: Number of mismatched keystrokes

    Returns:
        Accuracy between 0 and 100; 100 when nothing was judged yet
    """
    if characters_judged == 0:
        return 100

    accuracy = ((characters_judged - errors) / characters_judged) * 100
    return max(0, round_half_up(accuracy))


def calculate_progress(cursor: int, total: int) -> int:
    """Percentage of the reference text already judged."""
    if total <= 0:
        return 0
    return round_half_up((cursor / total) * 100)


def calculate_net_wpm(gross_wpm: int, accuracy: int) -> int:
    """Scale gross WPM by accuracy."""
    return round_half_up(gross_wpm * (accuracy / 100))


def get_grade(wpm: int, accuracy: int) -> str:
    """Map a (wpm, accuracy) pair to a letter grade.

    Tiers are checked top-down and the first match wins. Accuracy below 80
    is an F regardless of speed.
    """
    if accuracy < 80:
        return "F"
    if wpm >= 70 and accuracy >= 95:
        return "A+"
    if wpm >= 60 and accuracy >= 90:
        return "A"
    if wpm >= 50 and accuracy >= 85:
        return "B"
    if wpm >= 40 and accuracy >= 80:
        return "C"
    return "D"


def get_performance_message(wpm: int, accuracy: int) -> str:
    """Short encouragement shown on the results screen."""
    if accuracy >= 95 and wpm >= 60:
        return "Outstanding!"
    if accuracy >= 90 and wpm >= 45:
        return "Excellent!"
    if accuracy >= 85 and wpm >= 30:
        return "Great Job!"
    if accuracy >= 80:
        return "Good Work!"
    return "Keep Practicing!"


def format_time(seconds: int) -> str:
    """Format a duration as "1m 5s" or "42s"."""
    mins = seconds // 60
    secs = seconds % 60
    return f"{mins}m {secs}s" if mins > 0 else f"{secs}s"


def minutes_between(start_ms: int, end_ms: int) -> float:
    """Elapsed minutes between two millisecond timestamps.

    Args:
        start_ms: Start timestamp in milliseconds
        end_ms: End timestamp in milliseconds

    Returns:
        Duration in minutes (non-negative)
    """
    duration = end_ms - start_ms
    if duration < 0:
        log.warning(f"Negative duration: {duration}ms (start={start_ms}, end={end_ms})")
        return 0.0
    return duration / 60000.0
