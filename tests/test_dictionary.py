"""Tests for the exclusion dictionary loader."""

from pathlib import Path

import pytest

from wikiocr.dictionary import ExclusionSet, load_exclusion_set
from wikiocr.exceptions import DictionaryLoadError


def test_load_trims_and_drops_blank_lines(dictionary_file: Path) -> None:
    exclusion_set = load_exclusion_set(dictionary_file)

    assert set(exclusion_set) == {"ねこ", "さかな"}
    assert exclusion_set.status == "2 words loaded"


def test_load_accepts_every_newline_convention(tmp_path: Path) -> None:
    path = tmp_path / "mixed.txt"
    path.write_bytes("a\nb\r\nc\rd".encode("utf-8"))

    assert set(load_exclusion_set(path)) == {"a", "b", "c", "d"}


def test_duplicates_collapse_and_count_matches_set(tmp_path: Path) -> None:
    path = tmp_path / "dupes.txt"
    path.write_text("ねこ\nねこ\n ねこ \t\nいぬ\n", encoding="utf-8")

    exclusion_set = load_exclusion_set(path)

    assert len(exclusion_set) == 2
    assert exclusion_set.status == "2 words loaded"


def test_ideographic_space_is_trimmed(tmp_path: Path) -> None:
    path = tmp_path / "wide.txt"
    path.write_text("\u3000ねこ\u3000\n", encoding="utf-8")

    assert "ねこ" in load_exclusion_set(path)


def test_byte_order_mark_is_not_part_of_first_word(tmp_path: Path) -> None:
    path = tmp_path / "bom.txt"
    path.write_bytes("\ufeffねこ\n".encode("utf-8"))

    assert "ねこ" in load_exclusion_set(path)


def test_loading_twice_yields_identical_sets(dictionary_file: Path) -> None:
    assert load_exclusion_set(dictionary_file) == load_exclusion_set(dictionary_file)


def test_empty_file_yields_empty_set(tmp_path: Path) -> None:
    path = tmp_path / "empty.txt"
    path.write_text("\n\n   \n", encoding="utf-8")

    exclusion_set = load_exclusion_set(path)

    assert len(exclusion_set) == 0
    assert exclusion_set.status == "0 words loaded"


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(DictionaryLoadError) as excinfo:
        load_exclusion_set(tmp_path / "missing.txt")

    assert excinfo.value.details["original_error"]
    assert "missing.txt" in excinfo.value.details["file_path"]


def test_non_utf8_file_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "sjis.txt"
    path.write_bytes("ねこ\n".encode("shift_jis"))

    with pytest.raises(DictionaryLoadError):
        load_exclusion_set(path)


class TestExclusionSet:
    def test_membership_is_exact_and_case_sensitive(self) -> None:
        exclusion_set = ExclusionSet(["Cat", "ねこ"])

        assert "Cat" in exclusion_set
        assert "cat" not in exclusion_set
        assert "ネコ" not in exclusion_set
        assert "ｎｅｋｏ" not in exclusion_set

    def test_from_lines_normalizes(self) -> None:
        assert ExclusionSet.from_lines(["  a ", "", " ", "b"]) == ExclusionSet(["a", "b"])

    def test_empty(self) -> None:
        assert len(ExclusionSet.empty()) == 0
        assert "" not in ExclusionSet.empty()
