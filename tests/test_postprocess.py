"""Tests for formatting recognized fragments into per-image blocks."""

from wikiocr.dictionary import ExclusionSet
from wikiocr.postprocess import (
    IMAGE_LOAD_ERROR, OCR_FAILED_ERROR, format_fragment, process_image
)

from .helpers import FakeRecognizer, make_broken_image, make_image


class TestFormatFragment:
    def test_excluded_word_is_bare(self):
        assert format_fragment("ねこ", ExclusionSet(["ねこ"])) == "ねこ\n"

    def test_other_word_is_bracketed(self):
        assert format_fragment("いぬ", ExclusionSet(["ねこ"])) == "[いぬ]\n"

    def test_whitespace_is_trimmed_before_lookup(self):
        assert format_fragment("  ねこ \t", ExclusionSet(["ねこ"])) == "ねこ\n"
        assert format_fragment(" いぬ ", ExclusionSet()) == "[いぬ]\n"

    def test_partial_match_is_not_excluded(self):
        assert format_fragment("ねこです", ExclusionSet(["ねこ"])) == "[ねこです]\n"

    def test_lookup_is_case_sensitive(self):
        assert format_fragment("cat", ExclusionSet(["Cat"])) == "[cat]\n"


def test_block_for_known_and_unknown_words(fake_recognizer):
    block = process_image(make_image(1), ExclusionSet(["ねこ"]), fake_recognizer)

    assert block == "ねこ\n[いぬ]\n\n"


def test_every_fragment_appears_exactly_once(fake_recognizer):
    block = process_image(make_image(3), ExclusionSet(["ねこ"]), fake_recognizer)

    lines = block.splitlines()
    assert lines == ["[さかな]", "ねこ", ""]
    assert "[ねこ]" not in lines


def test_undecoded_image_yields_load_error_line(fake_recognizer):
    block = process_image(make_broken_image(), ExclusionSet(), fake_recognizer)

    assert block == f"{IMAGE_LOAD_ERROR}\n\n"
    assert fake_recognizer.calls == []


def test_ocr_failure_yields_error_line(fake_recognizer):
    block = process_image(make_image(9), ExclusionSet(), fake_recognizer)

    assert block == f"{OCR_FAILED_ERROR}\n\n"


def test_unexpected_recognizer_error_yields_error_line():
    recognizer = FakeRecognizer({4: KeyError("region")})

    block = process_image(make_image(4), ExclusionSet(), recognizer)

    assert block == f"{OCR_FAILED_ERROR}\n\n"


def test_image_without_text_yields_blank_line():
    block = process_image(make_image(5), ExclusionSet(), FakeRecognizer({5: []}))

    assert block == "\n"
