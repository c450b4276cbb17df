"""Loading practice texts from files."""

import logging
from pathlib import Path

log = logging.getLogger("typetrainer.loader")

MAX_TEXT_BYTES = 1024 * 1024
ALLOWED_SUFFIXES = (".txt",)


class TextLoadError(OSError):
    """Raised when a practice text file cannot be used."""


def load_text_file(path: Path, max_bytes: int = MAX_TEXT_BYTES) -> str:
    """Read a plain-text practice file.

    Undecodable bytes are dropped rather than failing the whole file.

    Args:
        path: Path to a .txt file
        max_bytes: Largest accepted file size

    Returns:
        File contents (not yet normalized)

    Raises:
        TextLoadError: If the file is missing, unreadable, not a .txt file,
            or too large
    """
    path = Path(path)
    if path.suffix.lower() not in ALLOWED_SUFFIXES:
        raise TextLoadError(f"Only plain text files are supported: {path.name}")

    try:
        size = path.stat().st_size
    except FileNotFoundError as e:
        raise TextLoadError(f"File not found: {path}") from e
    except OSError as e:
        raise TextLoadError(f"Cannot read {path}: {e}") from e

    if size > max_bytes:
        raise TextLoadError(f"File too large ({size} bytes, limit {max_bytes}): {path.name}")

    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
    except OSError as e:
        raise TextLoadError(f"Cannot read {path}: {e}") from e

    log.info(f"Loaded {len(text)} characters from {path}")
    return text
