"""Normalization and validation of practice texts."""

import logging
import re

from core.models import ValidationResult

log = logging.getLogger("typetrainer.normalizer")

MIN_TEXT_LENGTH = 10
MIN_WORD_COUNT = 3

# Folding is case-insensitive; replacements are always lowercase.
_LETTER_FOLDS = [
    (re.compile("[àáâãäå]", re.IGNORECASE), "a"),
    (re.compile("[èéêë]", re.IGNORECASE), "e"),
    (re.compile("[ìíîï]", re.IGNORECASE), "i"),
    (re.compile("[òóôõö]", re.IGNORECASE), "o"),
    (re.compile("[ùúûü]", re.IGNORECASE), "u"),
    (re.compile("[ýÿ]", re.IGNORECASE), "y"),
    (re.compile("ç", re.IGNORECASE), "c"),
    (re.compile("ñ", re.IGNORECASE), "n"),
    (re.compile("æ", re.IGNORECASE), "ae"),
    (re.compile("œ", re.IGNORECASE), "oe"),
    (re.compile("ð", re.IGNORECASE), "d"),
    (re.compile("þ", re.IGNORECASE), "th"),
]

_PUNCTUATION_FOLDS = [
    (re.compile("[‘’]"), "'"),
    (re.compile("[“”]"), '"'),
    (re.compile("[–—]"), "-"),
    (re.compile("…"), "..."),
]

# re.ASCII keeps \w and \s to what a standard keyboard can produce
_DISALLOWED = re.compile(r"[^\w\s\-'\".]", re.ASCII)
_DISALLOWED_DISPLAY = re.compile(r"[^\w\s\-'\",.?!;:]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_WORD_CHAR = re.compile(r"\w", re.ASCII)


def normalize_text(raw: str) -> str:
    """Convert arbitrary text into a string typeable on a standard keyboard.

    Accented letters are folded to their base letter, typographic quotes,
    dashes and ellipses become ASCII, and anything else outside word
    characters, whitespace and - ' " . is replaced by a space. Whitespace
    runs are collapsed and the result is trimmed.

    Args:
        raw: Text as pasted or loaded by the user

    Returns:
        Normalized text (empty for empty input)
    """
    if not raw:
        return ""

    text = raw
    for pattern, replacement in _LETTER_FOLDS:
        text = pattern.sub(replacement, text)
    for pattern, replacement in _PUNCTUATION_FOLDS:
        text = pattern.sub(replacement, text)

    text = _DISALLOWED.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_for_display(raw: str) -> str:
    """Lighter cleanup for previews; keeps common sentence punctuation."""
    if not raw:
        return ""
    text = _DISALLOWED_DISPLAY.sub(" ", raw)
    return _WHITESPACE.sub(" ", text).strip()


def count_words(text: str) -> int:
    """Count whitespace-delimited words.

    Args:
        text: Text to count, usually already normalized

    Returns:
        Number of non-empty tokens
    """
    return len([token for token in text.split() if token])


def validate_typing_text(raw: str) -> ValidationResult:
    """Check whether a text is long and rich enough to practice.

    All checks run independently so every problem is reported at once.

    Args:
        raw: Candidate text before normalization

    Returns:
        ValidationResult describing the normalized text
    """
    normalized = normalize_text(raw)
    length = len(normalized)
    word_count = count_words(normalized)
    has_word_chars = _WORD_CHAR.search(normalized) is not None

    issues: list[str] = []
    if length < MIN_TEXT_LENGTH:
        issues.append(f"Text too short ({length}/{MIN_TEXT_LENGTH} characters)")
    if not has_word_chars:
        issues.append("No valid word characters found")
    if word_count < MIN_WORD_COUNT:
        issues.append(f"Too few words ({word_count} words)")

    is_valid = length >= MIN_TEXT_LENGTH and has_word_chars and word_count >= MIN_WORD_COUNT
    if not is_valid:
        log.debug(f"Rejected practice text: {issues}")

    return ValidationResult(
        is_valid=is_valid,
        message=(
            f"Ready! {length} chars, {word_count} words"
            if is_valid
            else "Text not suitable for typing test"
        ),
        normalized_length=length,
        word_count=word_count,
        issues=issues,
    )


def is_valid_typing_text(raw: str) -> bool:
    """Quick usability check without the word-count rule.

    Only the length and word-character checks apply, so a single long
    word passes here while validate_typing_text() still rejects it.

    Args:
        raw: Candidate text before normalization

    Returns:
        True if the normalized text is long enough and has word characters
    """
    normalized = normalize_text(raw)
    return len(normalized) >= MIN_TEXT_LENGTH and _WORD_CHAR.search(normalized) is not None
