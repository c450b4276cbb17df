"""Tests for loading practice texts from files."""

import pytest

from utils.text_loader import TextLoadError, load_text_file


class TestLoadTextFile:
    """Tests for load_text_file."""

    def test_loads_utf8_text(self, tmp_path):
        path = tmp_path / "lesson.txt"
        path.write_text("Crème brûlée recipe", encoding="utf-8")
        assert load_text_file(path) == "Crème brûlée recipe"

    def test_undecodable_bytes_dropped(self, tmp_path):
        path = tmp_path / "lesson.txt"
        path.write_bytes(b"hello \xff\xfe world")
        assert load_text_file(path) == "hello  world"

    def test_suffix_is_case_insensitive(self, tmp_path):
        path = tmp_path / "LESSON.TXT"
        path.write_text("abc", encoding="utf-8")
        assert load_text_file(path) == "abc"

    def test_rejects_non_text_files(self, tmp_path):
        path = tmp_path / "lesson.pdf"
        path.write_bytes(b"%PDF")
        with pytest.raises(TextLoadError, match="plain text"):
            load_text_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(TextLoadError, match="not found"):
            load_text_file(tmp_path / "missing.txt")

    def test_too_large(self, tmp_path):
        path = tmp_path / "lesson.txt"
        path.write_text("0123456789", encoding="utf-8")
        with pytest.raises(TextLoadError, match="too large"):
            load_text_file(path, max_bytes=5)

    def test_directory_with_txt_name(self, tmp_path):
        """A directory is reported as a load error, not IsADirectoryError."""
        path = tmp_path / "notes.txt"
        path.mkdir()
        with pytest.raises(TextLoadError, match="Cannot read"):
            load_text_file(path)

    def test_error_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            load_text_file(tmp_path / "missing.txt")
