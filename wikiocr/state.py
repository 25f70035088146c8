#!/usr/bin/env python3
"""
Application State Module

The state owned by the user interface: the selected images, the loaded
exclusion dictionary, progress and the result text. It is only changed from
the UI thread; a running batch reports back through events passed to
`apply_event`.
"""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .batch import (
    NO_IMAGES_MESSAGE, BatchCancelled, BatchEvent, BatchMessage, BatchProgress, BatchResult
)
from .dictionary import ExclusionSet, load_exclusion_set
from .exceptions import DictionaryLoadError
from .images import SelectedImage

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "OCR results will appear here."
NO_DICTIONARY_STATUS = "No dictionary file selected."


@dataclass
class AppState:
    selected_images: List[SelectedImage] = field(default_factory=list)
    exclusion_set: ExclusionSet = field(default_factory=ExclusionSet.empty)
    dictionary_status: str = NO_DICTIONARY_STATUS
    recognized_text: str = PLACEHOLDER_TEXT
    is_processing: bool = False
    progress: float = 0.0
    preview_image_id: Optional[uuid.UUID] = None

    # Images

    def select_images(self, paths: Iterable[Union[str, Path]]) -> List[SelectedImage]:
        """Replace the current selection with freshly decoded images."""
        self.selected_images = [SelectedImage.from_path(p) for p in paths]
        self.preview_image_id = None
        return self.selected_images

    def add_images(self, paths: Iterable[Union[str, Path]]) -> List[SelectedImage]:
        added = [SelectedImage.from_path(p) for p in paths]
        self.selected_images.extend(added)
        return added

    def remove_image(self, image_id: uuid.UUID) -> None:
        self.selected_images = [img for img in self.selected_images if img.id != image_id]
        if self.preview_image_id == image_id:
            self.preview_image_id = None

    def open_preview(self, image_id: uuid.UUID) -> Optional[SelectedImage]:
        """Show an image full size. Undecoded images have nothing to preview."""
        image = self._find_image(image_id)
        if image is None or not image.is_decoded:
            return None
        self.preview_image_id = image_id
        return image

    def close_preview(self) -> None:
        self.preview_image_id = None

    @property
    def preview_image(self) -> Optional[SelectedImage]:
        if self.preview_image_id is None:
            return None
        return self._find_image(self.preview_image_id)

    def _find_image(self, image_id: uuid.UUID) -> Optional[SelectedImage]:
        for image in self.selected_images:
            if image.id == image_id:
                return image
        return None

    # Dictionary

    def load_dictionary(self, file_path: Union[str, Path]) -> bool:
        """
        Load a new exclusion dictionary.

        On failure the previously loaded set stays in effect and only the
        status message changes.

        Returns:
            True if the dictionary was replaced
        """
        try:
            self.exclusion_set = load_exclusion_set(file_path)
        except DictionaryLoadError as e:
            reason = e.details.get('original_error') or e.message
            self.dictionary_status = f"Failed to load dictionary: {reason}"
            return False

        self.dictionary_status = self.exclusion_set.status
        return True

    def dictionary_selection_failed(self, reason: str) -> None:
        self.dictionary_status = f"Failed to select dictionary file: {reason}"

    # Batch

    @property
    def can_run_ocr(self) -> bool:
        return bool(self.selected_images) and not self.is_processing

    @property
    def can_copy(self) -> bool:
        return bool(self.recognized_text) and self.recognized_text != PLACEHOLDER_TEXT

    def begin_batch(self) -> Optional[Tuple[SelectedImage, ...]]:
        """
        Enter the processing state and return the images to process.

        Returns None, after showing a message, when nothing is selected.
        """
        self.progress = 0.0
        if not self.selected_images:
            self.recognized_text = NO_IMAGES_MESSAGE
            self.is_processing = False
            return None

        self.recognized_text = ""
        self.is_processing = True
        return tuple(self.selected_images)

    def apply_event(self, event: BatchEvent) -> None:
        if isinstance(event, BatchProgress):
            self.progress = event.percent
        elif isinstance(event, BatchResult):
            self.progress = event.progress
            self.recognized_text = event.text
            self.is_processing = False
        elif isinstance(event, BatchMessage):
            self.recognized_text = event.text
            self.is_processing = False
        elif isinstance(event, BatchCancelled):
            self.is_processing = False
            logger.info(f"Batch cancelled at {event.completed}/{event.total}")
        else:
            raise TypeError(f"Unknown batch event: {event!r}")
