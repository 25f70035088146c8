"""Test doubles shared across the suite."""

from pathlib import Path
from typing import Dict, List, Union

import numpy as np

from wikiocr.images import SelectedImage
from wikiocr.ocr_engine import RecognizedFragment


class FakeRecognizer:
    """
    Returns scripted lines keyed by the first pixel value of the image.

    A script entry that is an exception instance is raised instead.
    """

    def __init__(self, script: Dict[int, Union[List[str], Exception]]):
        self.script = script
        self.calls: List[int] = []
        self.engine = 'fake'

    def recognize(self, pixels: np.ndarray) -> List[RecognizedFragment]:
        key = int(pixels.flat[0])
        self.calls.append(key)
        outcome = self.script[key]
        if isinstance(outcome, Exception):
            raise outcome
        return [RecognizedFragment(text=line) for line in outcome]

    def is_available(self) -> bool:
        return True


def make_image(key: int, name: str = "") -> SelectedImage:
    """An already decoded 4x4 image whose pixels all equal `key`."""
    pixels = np.full((4, 4, 3), key, dtype=np.uint8)
    return SelectedImage(path=Path(name or f"image{key}.png"), pixels=pixels)


def make_broken_image(name: str = "broken.png") -> SelectedImage:
    return SelectedImage(path=Path(name), decode_error="decoding failed")
