"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

CAPTURE_ENCODING = "LINEAR16"
CAPTURE_SAMPLE_RATE = 48000
DEFAULT_LANGUAGE_CODE = "en-US"
RECOGNIZE_URL = "https://speech.googleapis.com/v1/speech:recognize"


class SessionState(str, Enum):
    IDLE = "IDLE"
    RECORDING = "RECORDING"
    PROCESSING = "PROCESSING"


@dataclass
class AudioFrame:
    pcm16_bytes: bytes
    sample_rate: int = CAPTURE_SAMPLE_RATE
    channels: int = 1
    timestamp_ms: int = 0


@dataclass(frozen=True)
class AudioBlob:
    """Finalized capture, tagged with the codec and rate it was recorded in."""

    data: bytes
    encoding: str = CAPTURE_ENCODING
    sample_rate_hertz: int = CAPTURE_SAMPLE_RATE
    channels: int = 1


@dataclass(frozen=True)
class DictationConfig:
    speech_api_key: str = ""
    llm_api_key: str = ""
    language_code: str = DEFAULT_LANGUAGE_CODE


@dataclass(frozen=True)
class TransportSettings:
    """Request-level settings for the recognition endpoint.

    ``request_timeout_s`` of ``None`` means the request waits for as long as
    the service takes.
    """

    recognize_url: str = RECOGNIZE_URL
    encoding: str = "OGG_OPUS"
    sample_rate_hertz: int = CAPTURE_SAMPLE_RATE
    request_timeout_s: Optional[float] = None


@dataclass
class PasteResult:
    success: bool
    reason: str
    clipboard_restored: bool
