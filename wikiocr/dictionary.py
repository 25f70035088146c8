#!/usr/bin/env python3
"""
Exclusion Dictionary Module

Loads the user's exclusion dictionary: a UTF-8 text file with one word per
line. Recognized lines that exactly match one of these words are emitted
without brackets.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Union

from .exceptions import DictionaryLoadError

logger = logging.getLogger(__name__)


class ExclusionSet:
    """
    Immutable set of trimmed, non-empty words.

    Membership is exact and case-sensitive; no width, kana or case
    normalization is applied beyond trimming.
    """

    __slots__ = ('_words',)

    def __init__(self, words: Iterable[str] = ()):
        self._words = frozenset(words)

    @classmethod
    def empty(cls) -> 'ExclusionSet':
        return cls()

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> 'ExclusionSet':
        """Build a set from raw lines, trimming each and dropping blanks."""
        stripped = (line.strip() for line in lines)
        return cls(word for word in stripped if word)

    @property
    def status(self) -> str:
        return f"{len(self)} words loaded"

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExclusionSet):
            return NotImplemented
        return self._words == other._words

    def __hash__(self) -> int:
        return hash(self._words)

    def __repr__(self) -> str:
        return f"ExclusionSet({sorted(self._words)!r})"


def load_exclusion_set(file_path: Union[str, Path]) -> ExclusionSet:
    """
    Load an exclusion dictionary file.

    Args:
        file_path: Path to a UTF-8 text file, one word per line. Any newline
            convention is accepted and blank lines are ignored.

    Returns:
        The loaded ExclusionSet

    Raises:
        DictionaryLoadError: If the file cannot be opened or is not valid UTF-8
    """
    path = Path(file_path)
    try:
        with open(path, 'r', encoding='utf-8-sig', newline='') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to load dictionary {path}: {e}")
        raise DictionaryLoadError(file_path=str(path), original_error=e) from e

    exclusion_set = ExclusionSet.from_lines(content.splitlines())
    logger.info(f"Loaded dictionary {path}: {exclusion_set.status}")
    logger.debug(f"Excluded words: {sorted(exclusion_set)}")
    return exclusion_set
