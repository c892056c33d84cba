"""Tests for SoundDeviceRecorder."""

from __future__ import annotations

from queue import Queue
from unittest.mock import MagicMock, patch

import pytest

from errors import AudioCaptureError
from models import AudioFrame
from recorder import SoundDeviceRecorder


# ---------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------

class _FakeNp:
    """Minimal numpy stand-in so recorder._on_audio doesn't bail."""

    class int16:
        pass

    @staticmethod
    def asarray(data, dtype=None):  # noqa: ANN001, ANN205
        return data


class _FakeAudioInput:
    """Fake audio input similar to what the sounddevice callback provides."""

    def __init__(self, n_samples: int = 4800, fill: bytes = b"\x00\x00") -> None:
        self._data = fill * n_samples

    def tobytes(self) -> bytes:
        return self._data


def _drain(q: Queue) -> list:
    items = []
    while not q.empty():
        items.append(q.get_nowait())
    return items


# ---------------------------------------------------------------
# Start / stop
# ---------------------------------------------------------------

@patch("recorder.sd")
def test_start_opens_48k_int16_stream(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    q: Queue[AudioFrame | None] = Queue()
    recorder.start(q)

    kwargs = mock_sd.InputStream.call_args.kwargs
    assert kwargs["samplerate"] == 48000
    assert kwargs["dtype"] == "int16"
    assert kwargs["blocksize"] == 4800
    mock_stream.start.assert_called_once()

    recorder.stop()
    mock_stream.stop.assert_called_once()
    mock_stream.close.assert_called_once()
    assert _drain(q) == [None]


@patch("recorder.sd")
def test_start_is_idempotent(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    q: Queue[AudioFrame | None] = Queue()
    recorder.start(q)
    recorder.start(q)

    assert mock_sd.InputStream.call_count == 1
    recorder.stop()


@patch("recorder.sd")
def test_second_stop_does_not_emit_another_sentinel(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    q: Queue[AudioFrame | None] = Queue()
    recorder.start(q)
    recorder.stop()
    recorder.stop()

    assert _drain(q) == [None]


def test_start_without_sounddevice_is_capture_error(monkeypatch) -> None:  # noqa: ANN001
    import recorder as rec_mod
    monkeypatch.setattr(rec_mod, "sd", None)

    recorder = SoundDeviceRecorder()
    with pytest.raises(AudioCaptureError, match="sounddevice is not installed"):
        recorder.start(Queue())


@patch("recorder.sd")
def test_device_failure_is_capture_error(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.side_effect = OSError("Error querying device -1")

    recorder = SoundDeviceRecorder()
    with pytest.raises(AudioCaptureError, match="microphone unavailable"):
        recorder.start(Queue())

    # a failed start leaves the recorder reusable
    mock_sd.InputStream.side_effect = None
    mock_sd.InputStream.return_value = MagicMock()
    recorder.start(Queue())
    recorder.stop()


# ---------------------------------------------------------------
# Audio callback
# ---------------------------------------------------------------

@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_callback_pushes_audio_frames(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder(chunk_ms=100)
    q: Queue[AudioFrame | None] = Queue()
    recorder.start(q)

    recorder._on_audio(_FakeAudioInput(4800), frames=4800, time_info=None, status=None)

    frame = q.get_nowait()
    assert isinstance(frame, AudioFrame)
    assert frame.sample_rate == 48000
    assert frame.channels == 1
    assert len(frame.pcm16_bytes) == 4800 * 2

    recorder.stop()


@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_frames_flushed_by_stream_stop_precede_sentinel(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    q: Queue[AudioFrame | None] = Queue()
    recorder.start(q)
    recorder._on_audio(_FakeAudioInput(2, b"\x01\x00"), frames=2, time_info=None, status=None)
    mock_stream.stop.side_effect = lambda: recorder._on_audio(
        _FakeAudioInput(2, b"\x02\x00"), frames=2, time_info=None, status=None
    )

    recorder.stop()

    items = _drain(q)
    assert [item.pcm16_bytes for item in items[:2]] == [b"\x01\x00" * 2, b"\x02\x00" * 2]
    assert items[2] is None


@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_queue_full_increments_dropped_chunks(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    q: Queue[AudioFrame | None] = Queue(maxsize=1)
    recorder.start(q)

    recorder._on_audio(_FakeAudioInput(), frames=4800, time_info=None, status=None)
    assert recorder.dropped_chunks == 0
    recorder._on_audio(_FakeAudioInput(), frames=4800, time_info=None, status=None)
    assert recorder.dropped_chunks == 1

    q.get_nowait()
    recorder.stop()
    assert q.get_nowait() is None


@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_callback_after_stop_is_noop(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    q: Queue[AudioFrame | None] = Queue()
    recorder.start(q)
    recorder.stop()
    q.get_nowait()

    recorder._on_audio(_FakeAudioInput(), frames=4800, time_info=None, status=None)
    assert q.empty()
