from __future__ import annotations

import random

import pytest

from audio_buffer import AudioBuffer
from errors import EMPTY_CAPTURE, EmptyCaptureError
from models import CAPTURE_ENCODING, CAPTURE_SAMPLE_RATE


def test_finalize_joins_segments_in_arrival_order() -> None:
    rng = random.Random(7)
    segments = [bytes(rng.randrange(256) for _ in range(rng.randrange(1, 64))) for _ in range(25)]

    buffer = AudioBuffer()
    for segment in segments:
        buffer.append(segment)

    blob = buffer.finalize()

    assert blob.data == b"".join(segments)
    assert blob.encoding == CAPTURE_ENCODING
    assert blob.sample_rate_hertz == CAPTURE_SAMPLE_RATE
    assert len(buffer) == 25


def test_finalize_on_empty_buffer_raises() -> None:
    buffer = AudioBuffer()

    with pytest.raises(EmptyCaptureError) as excinfo:
        buffer.finalize()

    assert excinfo.value.code == EMPTY_CAPTURE


def test_finalize_keeps_segments_until_cleared() -> None:
    buffer = AudioBuffer()
    buffer.append(b"ab")
    buffer.append(b"cde")

    buffer.finalize()
    assert len(buffer) == 2
    assert buffer.byte_count == 5

    buffer.clear()
    assert len(buffer) == 0
    assert buffer.byte_count == 0


def test_finalize_happens_once() -> None:
    buffer = AudioBuffer()
    buffer.append(b"x")
    buffer.finalize()

    with pytest.raises(RuntimeError):
        buffer.finalize()
    with pytest.raises(RuntimeError):
        buffer.append(b"y")


def test_custom_tags_are_carried_on_the_blob() -> None:
    buffer = AudioBuffer(encoding="OGG_OPUS", sample_rate_hertz=16000, channels=2)
    buffer.append(b"\x01\x02")

    blob = buffer.finalize()

    assert blob.encoding == "OGG_OPUS"
    assert blob.sample_rate_hertz == 16000
    assert blob.channels == 2


def test_zero_length_segments_count_as_empty_capture() -> None:
    buffer = AudioBuffer()
    buffer.append(b"")
    buffer.append(b"")

    with pytest.raises(EmptyCaptureError):
        buffer.finalize()
