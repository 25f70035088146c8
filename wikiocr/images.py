#!/usr/bin/env python3
"""
Image Selection Module

Decoding of user-selected image files into OpenCV pixel buffers.
"""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from .exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {'.png', '.jpg', '.jpeg'}


def decode_image(file_path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into a BGR numpy array.

    The file is read into a byte buffer first so paths containing non-ASCII
    characters decode on every platform.

    Raises:
        ImageDecodeError: If the file is missing, unreadable or not an image
    """
    path = Path(file_path)
    try:
        buffer = np.fromfile(str(path), dtype=np.uint8)
    except (OSError, ValueError) as e:
        raise ImageDecodeError(file_path=str(path), operation="reading", original_error=e) from e

    if buffer.size == 0:
        raise ImageDecodeError(file_path=str(path), operation="decoding")

    try:
        img = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodeError(file_path=str(path), operation="decoding", original_error=e) from e

    if img is None:
        raise ImageDecodeError(file_path=str(path), operation="decoding")
    return img


@dataclass(eq=False)
class SelectedImage:
    """An image picked by the user. `pixels` is None when decoding failed."""

    path: Path
    pixels: Optional[np.ndarray] = None
    decode_error: Optional[str] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @classmethod
    def from_path(cls, file_path: Union[str, Path]) -> 'SelectedImage':
        """Decode `file_path`, recording the failure instead of raising."""
        path = Path(file_path)
        try:
            return cls(path=path, pixels=decode_image(path))
        except ImageDecodeError as e:
            logger.warning(f"Could not decode {path}: {e}")
            return cls(path=path, decode_error=str(e))

    @property
    def is_decoded(self) -> bool:
        return self.pixels is not None

    @property
    def name(self) -> str:
        return self.path.name
