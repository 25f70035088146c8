#!/usr/bin/env python3
"""
OCR Engine Module

This module wraps the external OCR capability. EasyOCR is the primary engine
with pytesseract as a fallback. Both are configured for Japanese recognition
in accurate mode by default and return one candidate per detected text
region, in the order the engine produces them.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

import cv2
import numpy as np
from PIL import Image

# OCR libraries
try:
    import easyocr
    EASYOCR_AVAILABLE = True
except ImportError:
    easyocr = None
    EASYOCR_AVAILABLE = False
    logging.getLogger(__name__).debug("EasyOCR not installed. Install with: pip install easyocr")

try:
    import pytesseract
    TESSERACT_AVAILABLE = True
except ImportError:
    pytesseract = None
    TESSERACT_AVAILABLE = False
    logging.getLogger(__name__).debug("pytesseract not installed. Install with: pip install pytesseract")

from .exceptions import (
    OCRError, OCREngineNotAvailableError, OCREngineInitializationError,
    OCRProcessingError, ImageDecodeError
)
from .memory_manager import MemoryManager

logger = logging.getLogger(__name__)

RECOGNITION_MODES = ('accurate', 'fast')
ENGINE_CHOICES = ('auto', 'easyocr', 'tesseract')

# EasyOCR language codes -> Tesseract traineddata names
TESSERACT_LANGUAGES = {
    'ja': 'jpn',
    'en': 'eng',
    'ch_sim': 'chi_sim',
    'ch_tra': 'chi_tra',
    'ko': 'kor',
}


@dataclass
class RecognizedFragment:
    """One recognized line of text for one detected region."""

    text: str
    confidence: float = 1.0
    bbox: list = field(default_factory=list)


class Recognizer(Protocol):
    """Anything that turns a decoded image into ordered text fragments."""

    def recognize(self, pixels: np.ndarray) -> List[RecognizedFragment]:
        ...


class OCREngine:
    """
    OCR Engine class that provides text extraction from images using multiple OCR engines.

    The EasyOCR reader is created on first use, since loading its models
    takes several seconds.
    """

    def __init__(self,
                 languages: Optional[List[str]] = None,
                 mode: str = 'accurate',
                 engine: str = 'auto',
                 use_gpu: bool = False,
                 preprocess_images: bool = False,
                 memory_limit_mb: Optional[int] = None):
        """
        Initialize the OCR engine.

        Args:
            languages: List of EasyOCR language codes. Defaults to ['ja']
            mode: 'accurate' (beam search / LSTM) or 'fast' (greedy decoding)
            engine: 'auto', 'easyocr' or 'tesseract'
            use_gpu: Whether to use GPU acceleration for EasyOCR
            preprocess_images: Whether to apply image preprocessing
            memory_limit_mb: Memory limit in MB for processing
        """
        if mode not in RECOGNITION_MODES:
            raise ValueError(f"Unsupported recognition mode: {mode}")
        if engine not in ENGINE_CHOICES:
            raise ValueError(f"Unsupported OCR engine: {engine}")

        self.languages = list(languages) if languages else ['ja']
        self.mode = mode
        self.engine = engine
        self.use_gpu = use_gpu
        self.preprocess_images = preprocess_images
        self.memory_manager = MemoryManager(memory_limit_mb)

        self.easyocr_reader = None
        self._easyocr_init_error: Optional[OCREngineInitializationError] = None

    @property
    def tesseract_config(self) -> str:
        # --oem 1 selects the LSTM recognizer; --psm 3 is automatic page segmentation
        return '--oem 1 --psm 3' if self.mode == 'accurate' else '--psm 3'

    @property
    def tesseract_lang(self) -> str:
        return '+'.join(TESSERACT_LANGUAGES.get(lang, lang) for lang in self.languages)

    def _get_easyocr_reader(self):
        # A failed initialization is not retried for later images
        if self._easyocr_init_error is not None:
            raise self._easyocr_init_error
        if self.easyocr_reader is None:
            if not EASYOCR_AVAILABLE:
                raise OCREngineNotAvailableError(engines_tried=['easyocr'])
            try:
                self.easyocr_reader = easyocr.Reader(
                    self.languages,
                    gpu=self.use_gpu,
                    verbose=False
                )
            except Exception as e:
                self._easyocr_init_error = OCREngineInitializationError("easyocr", e)
                raise self._easyocr_init_error from e
            logger.info(f"EasyOCR initialized with languages: {self.languages}")
        return self.easyocr_reader

    def preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """
        Preprocess image for better OCR accuracy.

        Args:
            image: Decoded BGR or grayscale image

        Returns:
            Preprocessed image as numpy array

        Raises:
            ImageDecodeError: If the image cannot be processed
        """
        if not self.preprocess_images:
            return image

        try:
            # Convert to grayscale
            if len(image.shape) == 3:
                gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            else:
                gray = image

            # Apply Gaussian blur to reduce noise
            blurred = cv2.GaussianBlur(gray, (5, 5), 0)

            # Apply adaptive thresholding
            processed = cv2.adaptiveThreshold(
                blurred, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
            )

            # Resize if image is too small
            height, width = processed.shape
            if height < 32 or width < 32:
                scale_factor = max(32 / height, 32 / width)
                new_width = int(width * scale_factor)
                new_height = int(height * scale_factor)
                processed = cv2.resize(processed, (new_width, new_height), interpolation=cv2.INTER_CUBIC)

            return processed

        except cv2.error as e:
            raise ImageDecodeError(operation="preprocessing", original_error=e) from e

    def recognize_easyocr(self, image: np.ndarray) -> List[RecognizedFragment]:
        """
        Recognize text regions with EasyOCR.

        Raises:
            OCRProcessingError: If OCR processing fails
        """
        reader = self._get_easyocr_reader()
        decoder = 'beamsearch' if self.mode == 'accurate' else 'greedy'

        with self.memory_manager.memory_context("easyocr processing"):
            try:
                # Convert to RGB for EasyOCR
                if len(image.shape) == 3:
                    rgb_image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
                else:
                    rgb_image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)

                results = reader.readtext(rgb_image, detail=1, decoder=decoder)
            except Exception as e:
                raise OCRProcessingError(engine_name="easyocr", original_error=e) from e

        return [
            RecognizedFragment(text=text, confidence=float(confidence), bbox=[list(map(float, p)) for p in bbox])
            for bbox, text, confidence in results
        ]

    def recognize_tesseract(self, image: np.ndarray) -> List[RecognizedFragment]:
        """
        Recognize text lines with pytesseract.

        Words are grouped into lines by (block, paragraph, line) in the order
        Tesseract reports them.

        Raises:
            OCRProcessingError: If OCR processing fails
        """
        if not TESSERACT_AVAILABLE:
            raise OCREngineNotAvailableError(engines_tried=['tesseract'])

        with self.memory_manager.memory_context("tesseract processing"):
            try:
                if len(image.shape) == 3:
                    pil_image = Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))
                else:
                    pil_image = Image.fromarray(image)

                data = pytesseract.image_to_data(
                    pil_image,
                    lang=self.tesseract_lang,
                    config=self.tesseract_config,
                    output_type=pytesseract.Output.DICT
                )
            except pytesseract.TesseractError as e:
                raise OCRProcessingError(
                    engine_name="tesseract",
                    original_error=e,
                    suggestion="Ensure Tesseract is properly installed and language data is available."
                ) from e
            except Exception as e:
                raise OCRProcessingError(engine_name="tesseract", original_error=e) from e

        return _group_tesseract_lines(data, joiner='' if 'ja' in self.languages else ' ')

    def recognize(self, pixels: np.ndarray) -> List[RecognizedFragment]:
        """
        Recognize text in a decoded image.

        In 'auto' mode EasyOCR is tried first and Tesseract is used when
        EasyOCR is missing or fails. A forced engine never falls back.

        Raises:
            OCREngineNotAvailableError: If no engines are available
            OCRProcessingError: If recognition fails
        """
        processed = self.preprocess_image(pixels)

        if self.engine == 'easyocr':
            return self.recognize_easyocr(processed)
        if self.engine == 'tesseract':
            return self.recognize_tesseract(processed)

        engines_tried = []
        last_error: Optional[OCRError] = None

        if EASYOCR_AVAILABLE:
            engines_tried.append('easyocr')
            try:
                return self.recognize_easyocr(processed)
            except OCRError as e:
                logger.warning(f"EasyOCR failed: {e}")
                last_error = e

        if TESSERACT_AVAILABLE:
            engines_tried.append('tesseract')
            return self.recognize_tesseract(processed)

        if last_error is not None:
            raise last_error
        raise OCREngineNotAvailableError(engines_tried)

    def is_available(self) -> bool:
        """Check if at least one OCR engine is available."""
        if self.engine == 'easyocr':
            return EASYOCR_AVAILABLE
        if self.engine == 'tesseract':
            return TESSERACT_AVAILABLE
        return EASYOCR_AVAILABLE or TESSERACT_AVAILABLE


def _group_tesseract_lines(data: dict, joiner: str = ' ') -> List[RecognizedFragment]:
    """Collapse word-level `image_to_data` output into line fragments."""
    lines = {}
    order = []
    for i, word in enumerate(data.get('text', [])):
        if not word or not word.strip():
            continue
        key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
        if key not in lines:
            lines[key] = {'words': [], 'confs': [], 'boxes': []}
            order.append(key)
        line = lines[key]
        line['words'].append(word.strip())
        line['confs'].append(float(data['conf'][i]))
        line['boxes'].append((data['left'][i], data['top'][i], data['width'][i], data['height'][i]))

    fragments = []
    for key in order:
        line = lines[key]
        x1 = min(b[0] for b in line['boxes'])
        y1 = min(b[1] for b in line['boxes'])
        x2 = max(b[0] + b[2] for b in line['boxes'])
        y2 = max(b[1] + b[3] for b in line['boxes'])
        fragments.append(RecognizedFragment(
            text=joiner.join(line['words']),
            confidence=sum(line['confs']) / len(line['confs']) / 100.0,
            bbox=[[x1, y1], [x2, y1], [x2, y2], [x1, y2]]
        ))
    return fragments


def get_available_engines() -> List[str]:
    """
    Get list of available OCR engines.

    Returns:
        List of available engine names
    """
    engines = []
    if EASYOCR_AVAILABLE:
        engines.append('easyocr')
    if TESSERACT_AVAILABLE:
        engines.append('tesseract')
    return engines
