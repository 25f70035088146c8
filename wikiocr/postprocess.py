#!/usr/bin/env python3
"""
OCR Post-Processing Module

Turns the recognized fragments of one image into a text block. Every line is
wrapped in brackets unless it exactly matches a word of the exclusion set.
"""

import logging

from .dictionary import ExclusionSet
from .exceptions import OCRError
from .images import SelectedImage
from .ocr_engine import Recognizer

logger = logging.getLogger(__name__)

IMAGE_LOAD_ERROR = "Error: image could not be loaded."
OCR_FAILED_ERROR = "Error: OCR failed."


def format_fragment(text: str, exclusion_set: ExclusionSet) -> str:
    """Format one recognized line: bare if excluded, `[text]` otherwise."""
    trimmed = text.strip()
    if trimmed in exclusion_set:
        return f"{trimmed}\n"
    return f"[{trimmed}]\n"


def process_image(image: SelectedImage, exclusion_set: ExclusionSet, recognizer: Recognizer) -> str:
    """
    Run OCR on one image and format the result block.

    Failures never propagate: an undecodable image or a failed recognition
    produces a fixed error line so the batch can move on to the next image.

    Returns:
        The formatted lines followed by one blank line
    """
    if image.pixels is None:
        logger.warning(f"Skipping {image.path}: {image.decode_error or 'not decoded'}")
        return f"{IMAGE_LOAD_ERROR}\n\n"

    try:
        fragments = recognizer.recognize(image.pixels)
    except OCRError as e:
        logger.error(f"OCR failed for {image.path}: {e}")
        return f"{OCR_FAILED_ERROR}\n\n"
    except Exception:
        logger.exception(f"Unexpected error during OCR of {image.path}")
        return f"{OCR_FAILED_ERROR}\n\n"

    logger.debug(f"{image.path}: {len(fragments)} regions recognized")
    block = ''.join(format_fragment(fragment.text, exclusion_set) for fragment in fragments)
    return block + "\n"
