"""Microphone recorder adapter."""

from __future__ import annotations

import logging
import threading
import time
from queue import Full, Queue
from typing import Any

from errors import AudioCaptureError
from models import CAPTURE_SAMPLE_RATE, AudioFrame

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger(__name__)


class SoundDeviceRecorder:
    """Pushes PCM16 segments onto a queue, then ``None`` once capture has stopped."""

    def __init__(
        self,
        sample_rate: int = CAPTURE_SAMPLE_RATE,
        channels: int = 1,
        chunk_ms: int = 100,
        sentinel_timeout_s: float = 1.0,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.chunk_ms = chunk_ms
        self._sentinel_timeout_s = sentinel_timeout_s
        self._stream: Any = None
        self._running = False
        self._lock = threading.Lock()
        self.dropped_chunks = 0
        self._audio_queue: Queue[AudioFrame | None] | None = None

    def start(self, audio_queue: Queue[AudioFrame | None]) -> None:
        with self._lock:
            if self._running:
                return
            if sd is None:
                raise AudioCaptureError("sounddevice is not installed")
            self._audio_queue = audio_queue
            self.dropped_chunks = 0
            blocksize = int(self.sample_rate * (self.chunk_ms / 1000.0))
            try:
                self._stream = sd.InputStream(
                    samplerate=self.sample_rate,
                    channels=self.channels,
                    dtype="int16",
                    blocksize=blocksize,
                    callback=self._on_audio,
                )
                self._stream.start()
            except Exception as exc:
                self._stream = None
                raise AudioCaptureError(f"microphone unavailable: {exc}") from exc
            self._running = True

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            if self._stream is not None:
                # stop() waits for pending callbacks, so every segment is queued
                # before the sentinel.
                self._stream.stop()
                self._stream.close()
                self._stream = None
            self._running = False
            if self.dropped_chunks:
                logger.warning("Dropped %d audio chunks", self.dropped_chunks)
            self._emit_sentinel()

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if not self._running or self._audio_queue is None:
            return
        if np is None:
            return
        if status:
            logger.debug("Input stream status: %s", status)
        payload = np.asarray(indata, dtype=np.int16).tobytes()
        frame = AudioFrame(
            pcm16_bytes=payload,
            sample_rate=self.sample_rate,
            channels=self.channels,
            timestamp_ms=int(time.time() * 1000),
        )
        try:
            self._audio_queue.put_nowait(frame)
        except Full:
            self.dropped_chunks += 1

    def _emit_sentinel(self) -> None:
        if self._audio_queue is None:
            return
        try:
            self._audio_queue.put(None, timeout=self._sentinel_timeout_s)
        except Full:
            logger.error("Audio queue full, end-of-capture marker not delivered")
