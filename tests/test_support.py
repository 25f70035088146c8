"""Tests for clipboard, memory and error helpers."""

import pyperclip
import pytest

from wikiocr import clipboard
from wikiocr.exceptions import DictionaryLoadError, OCRError, MemoryLimitExceededError, describe_error
from wikiocr.memory_manager import MemoryManager


class TestClipboard:
    def test_copy_success(self, monkeypatch):
        copied = []
        monkeypatch.setattr(clipboard.pyperclip, "copy", copied.append)

        assert clipboard.copy_to_clipboard("[いぬ]\n") is True
        assert copied == ["[いぬ]\n"]

    def test_copy_without_clipboard_mechanism(self, monkeypatch):
        def unavailable(text):
            raise pyperclip.PyperclipException("no copy mechanism")

        monkeypatch.setattr(clipboard.pyperclip, "copy", unavailable)

        assert clipboard.copy_to_clipboard("text") is False


class TestMemoryManager:
    def test_no_limit_never_raises(self):
        manager = MemoryManager()

        with manager.memory_context("test"):
            pass
        assert manager.get_memory_usage() > 0

    def test_limit_exceeded(self):
        manager = MemoryManager(memory_limit_mb=1)

        with pytest.raises(MemoryLimitExceededError) as excinfo:
            manager.check_memory_limit("recognition")

        assert excinfo.value.details["memory_limit"] == 1
        assert excinfo.value.details["memory_used"] >= 1

    def test_body_error_is_not_masked(self):
        manager = MemoryManager(memory_limit_mb=10 ** 9)

        with pytest.raises(ValueError):
            with manager.memory_context("test"):
                raise ValueError("inner")


def test_describe_error_appends_suggestion():
    error = DictionaryLoadError(file_path="words.txt", original_error=OSError("denied"))

    text = describe_error(error)

    assert text.startswith("Dictionary file could not be loaded. File: words.txt Reason: denied")
    assert text.endswith("Suggestion: Choose a UTF-8 text file with one word per line.")


def test_describe_error_without_suggestion():
    assert describe_error(OCRError("plain")) == "plain"
