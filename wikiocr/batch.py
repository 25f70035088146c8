#!/usr/bin/env python3
"""
Batch Processing Module

Runs the post-processor over every selected image, one at a time, and reports
progress. The aggregated text is published once, after the last image.

`BatchWorker` moves a batch onto a background thread and hands its events to
the UI through a queue, so the UI thread never blocks on OCR.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from .dictionary import ExclusionSet
from .images import SelectedImage
from .ocr_engine import Recognizer
from .postprocess import process_image

logger = logging.getLogger(__name__)

NO_IMAGES_MESSAGE = "Select images first."


@dataclass(frozen=True)
class BatchProgress:
    completed: int
    total: int

    @property
    def percent(self) -> float:
        return self.completed / self.total * 100


@dataclass(frozen=True)
class BatchMessage:
    """A batch that ended without processing, e.g. no images selected."""

    text: str


@dataclass(frozen=True)
class BatchResult:
    text: str
    progress: float = 100.0


@dataclass(frozen=True)
class BatchCancelled:
    completed: int
    total: int


BatchEvent = Union[BatchProgress, BatchMessage, BatchResult, BatchCancelled]


def run_batch(images: Iterable[SelectedImage],
              exclusion_set: ExclusionSet,
              recognizer: Recognizer,
              cancel_event: Optional[threading.Event] = None) -> Iterator[BatchEvent]:
    """
    Process images in order and yield progress, then the aggregated result.

    The image list is copied when this function is called, so later changes to
    the caller's selection do not affect the returned iterator.

    Args:
        images: Images to process, in output order
        exclusion_set: Words that are emitted without brackets
        recognizer: OCR capability
        cancel_event: Checked between images; when set the batch stops

    Returns:
        Iterator of BatchEvent values
    """
    snapshot = tuple(images)
    return _iter_batch(snapshot, exclusion_set, recognizer, cancel_event)


def _iter_batch(images: Sequence[SelectedImage],
                exclusion_set: ExclusionSet,
                recognizer: Recognizer,
                cancel_event: Optional[threading.Event]) -> Iterator[BatchEvent]:
    if not images:
        yield BatchMessage(NO_IMAGES_MESSAGE)
        return

    total = len(images)
    blocks: List[str] = []
    logger.info(f"Starting OCR batch of {total} image(s)")

    for index, image in enumerate(images):
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"OCR batch cancelled after {index}/{total} image(s)")
            yield BatchCancelled(completed=index, total=total)
            return

        blocks.append(process_image(image, exclusion_set, recognizer))
        yield BatchProgress(completed=index + 1, total=total)

    logger.info(f"OCR batch finished: {total} image(s)")
    yield BatchResult(text=''.join(blocks))


class BatchWorker:
    """
    Runs one batch at a time on a daemon thread.

    Events are put on `events` in the order they are produced; the UI thread
    reads them with `drain()`.
    """

    def __init__(self, recognizer: Recognizer):
        self.recognizer = recognizer
        self.events: "queue.Queue[BatchEvent]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._cancel_event = threading.Event()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, images: Iterable[SelectedImage], exclusion_set: ExclusionSet) -> None:
        """Snapshot `images` and process them in the background."""
        if self.is_running():
            raise RuntimeError("An OCR batch is already running")

        self._cancel_event = threading.Event()
        batch = run_batch(images, exclusion_set, self.recognizer, self._cancel_event)

        self._thread = threading.Thread(target=self._run, args=(batch,), name="ocr-batch")
        self._thread.daemon = True
        self._thread.start()

    def _run(self, batch: Iterator[BatchEvent]) -> None:
        try:
            for event in batch:
                self.events.put(event)
        except Exception as e:
            logger.exception("OCR batch crashed")
            self.events.put(BatchMessage(f"Unexpected error during OCR: {e}"))

    def cancel(self) -> None:
        """Ask the running batch to stop before its next image."""
        self._cancel_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def drain(self) -> List[BatchEvent]:
        """Return every event queued so far without blocking."""
        drained = []
        try:
            while True:
                drained.append(self.events.get_nowait())
        except queue.Empty:
            pass
        return drained
