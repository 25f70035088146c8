"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from wikiocr.exceptions import OCRProcessingError

from .helpers import FakeRecognizer


@pytest.fixture
def fake_recognizer() -> FakeRecognizer:
    return FakeRecognizer({
        1: ["ねこ", "いぬ"],
        2: ["  とり  "],
        3: ["さかな", "ねこ"],
        9: OCRProcessingError(engine_name="fake"),
    })


@pytest.fixture
def dictionary_file(tmp_path: Path) -> Path:
    path = tmp_path / "dictionary.txt"
    path.write_bytes("ねこ\r\n\r\n  さかな  \n".encode("utf-8"))
    return path
