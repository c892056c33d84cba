"""Protocol interfaces used by RecordingController and PipelineOrchestrator."""

from __future__ import annotations

from queue import Queue
from typing import Protocol

from models import AudioBlob, AudioFrame, PasteResult


class Recorder(Protocol):
    def start(self, audio_queue: Queue[AudioFrame | None]) -> None: ...

    def stop(self) -> None: ...


class Transcriber(Protocol):
    def transcribe(self, audio: AudioBlob, language_code: str, api_key: str) -> str: ...


class Refiner(Protocol):
    def refine(self, raw_text: str, api_key: str) -> str: ...


class DeliverySink(Protocol):
    def replace_selection(self, text: str) -> PasteResult: ...

