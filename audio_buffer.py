"""Ordered accumulation of captured audio segments."""

from __future__ import annotations

from errors import EmptyCaptureError
from models import CAPTURE_ENCODING, CAPTURE_SAMPLE_RATE, AudioBlob


class AudioBuffer:
    def __init__(
        self,
        encoding: str = CAPTURE_ENCODING,
        sample_rate_hertz: int = CAPTURE_SAMPLE_RATE,
        channels: int = 1,
    ) -> None:
        self.encoding = encoding
        self.sample_rate_hertz = sample_rate_hertz
        self.channels = channels
        self._segments: list[bytes] = []
        self._finalized = False

    def __len__(self) -> int:
        return len(self._segments)

    @property
    def byte_count(self) -> int:
        return sum(len(segment) for segment in self._segments)

    def append(self, segment: bytes) -> None:
        if self._finalized:
            raise RuntimeError("audio buffer is already finalized")
        self._segments.append(bytes(segment))

    def finalize(self) -> AudioBlob:
        """Join the segments in append order into one tagged blob.

        The segments are kept; ``clear`` discards them.
        """
        if self._finalized:
            raise RuntimeError("audio buffer is already finalized")
        data = b"".join(self._segments)
        if not data:
            raise EmptyCaptureError("finalize called with no captured audio")
        self._finalized = True
        return AudioBlob(
            data=data,
            encoding=self.encoding,
            sample_rate_hertz=self.sample_rate_hertz,
            channels=self.channels,
        )

    def clear(self) -> None:
        self._segments.clear()
