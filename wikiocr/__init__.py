"""
WikiOCR Package

On-device OCR for Japanese images with dictionary-aware bracket highlighting.
"""

__version__ = "1.0.0"

from .batch import BatchWorker, run_batch
from .dictionary import ExclusionSet, load_exclusion_set
from .images import SelectedImage
from .ocr_engine import OCREngine, RecognizedFragment, get_available_engines
from .postprocess import format_fragment, process_image

__all__ = [
    "BatchWorker",
    "ExclusionSet",
    "OCREngine",
    "RecognizedFragment",
    "SelectedImage",
    "format_fragment",
    "get_available_engines",
    "load_exclusion_set",
    "process_image",
    "run_batch",
]
