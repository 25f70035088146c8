"""Tests for the batch driver and its background worker."""

import threading

from wikiocr.batch import (
    NO_IMAGES_MESSAGE, BatchCancelled, BatchMessage, BatchProgress, BatchResult,
    BatchWorker, run_batch
)
from wikiocr.dictionary import ExclusionSet
from wikiocr.postprocess import IMAGE_LOAD_ERROR, OCR_FAILED_ERROR

from .helpers import FakeRecognizer, make_broken_image, make_image


def test_empty_selection_yields_only_message(fake_recognizer):
    events = list(run_batch([], ExclusionSet(), fake_recognizer))

    assert events == [BatchMessage(NO_IMAGES_MESSAGE)]
    assert fake_recognizer.calls == []


def test_progress_after_each_image_then_result(fake_recognizer):
    images = [make_image(1), make_image(2)]

    events = list(run_batch(images, ExclusionSet(["ねこ"]), fake_recognizer))

    assert events[:2] == [BatchProgress(1, 2), BatchProgress(2, 2)]
    assert [e.percent for e in events[:2]] == [50.0, 100.0]
    assert events[2] == BatchResult("ねこ\n[いぬ]\n\n[とり]\n\n")
    assert len(events) == 3


def test_undecodable_image_does_not_abort_batch(fake_recognizer):
    images = [make_image(1), make_broken_image(), make_image(3)]

    events = list(run_batch(images, ExclusionSet(["ねこ"]), fake_recognizer))
    result = events[-1]

    assert isinstance(result, BatchResult)
    assert result.text == (
        "ねこ\n[いぬ]\n\n"
        f"{IMAGE_LOAD_ERROR}\n\n"
        "[さかな]\nねこ\n\n"
    )
    assert result.progress == 100.0
    assert events[2] == BatchProgress(3, 3)
    assert events[2].percent == 100.0


def test_ocr_failure_does_not_abort_batch(fake_recognizer):
    images = [make_image(9), make_image(2)]

    result = list(run_batch(images, ExclusionSet(), fake_recognizer))[-1]

    assert result.text.endswith("[とり]\n\n")
    assert fake_recognizer.calls == [9, 2]


def test_selection_is_snapshotted_at_call_time(fake_recognizer):
    images = [make_image(1)]

    events = run_batch(images, ExclusionSet(), fake_recognizer)
    images.append(make_image(2))
    images.pop(0)

    assert list(events)[-1] == BatchResult("[ねこ]\n[いぬ]\n\n")


def test_no_partial_text_before_the_end(fake_recognizer):
    events = list(run_batch([make_image(1), make_image(2), make_image(3)], ExclusionSet(), fake_recognizer))

    assert all(isinstance(e, BatchProgress) for e in events[:-1])
    assert isinstance(events[-1], BatchResult)


def test_cancel_event_stops_between_images(fake_recognizer):
    cancel = threading.Event()
    events = run_batch([make_image(1), make_image(2)], ExclusionSet(), fake_recognizer, cancel)

    assert next(events) == BatchProgress(1, 2)
    cancel.set()

    assert list(events) == [BatchCancelled(completed=1, total=2)]
    assert fake_recognizer.calls == [1]


class TestBatchWorker:
    def test_delivers_events_in_order(self, fake_recognizer):
        worker = BatchWorker(fake_recognizer)

        worker.start([make_image(1), make_broken_image(), make_image(2)], ExclusionSet())
        worker.join(timeout=5)

        events = worker.drain()
        assert events[:3] == [BatchProgress(1, 3), BatchProgress(2, 3), BatchProgress(3, 3)]
        assert isinstance(events[3], BatchResult)
        assert not worker.is_running()
        assert worker.drain() == []

    def test_recognizer_error_is_contained_to_its_image(self):
        worker = BatchWorker(FakeRecognizer({1: RuntimeError("boom"), 2: ["b"]}))

        worker.start([make_image(1), make_image(2)], ExclusionSet())
        worker.join(timeout=5)

        events = worker.drain()
        assert events[:2] == [BatchProgress(1, 2), BatchProgress(2, 2)]
        assert events[2] == BatchResult(f"{OCR_FAILED_ERROR}\n\n[b]\n\n")

    def test_unexpected_error_is_reported_as_message(self):
        class MalformedRecognizer(FakeRecognizer):
            def recognize(self, pixels):
                return [None]

        worker = BatchWorker(MalformedRecognizer({}))

        worker.start([make_image(1)], ExclusionSet())
        worker.join(timeout=5)

        events = worker.drain()
        assert len(events) == 1
        assert isinstance(events[0], BatchMessage)
        assert events[0].text.startswith("Unexpected error during OCR:")

    def test_cancel_while_image_in_flight(self):
        started = threading.Event()
        release = threading.Event()

        class BlockingRecognizer(FakeRecognizer):
            def recognize(self, pixels):
                started.set()
                release.wait(5)
                return super().recognize(pixels)

        worker = BatchWorker(BlockingRecognizer({1: ["a"], 2: ["b"]}))
        worker.start([make_image(1), make_image(2)], ExclusionSet())
        assert started.wait(5)
        worker.cancel()
        release.set()
        worker.join(timeout=5)

        assert worker.drain() == [BatchProgress(1, 2), BatchCancelled(completed=1, total=2)]
