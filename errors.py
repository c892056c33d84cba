"""Shared error codes, user-facing messages and the pipeline exceptions."""

from __future__ import annotations

from typing import Optional

PERMISSION_DENIED = "PERMISSION_DENIED"
EMPTY_CAPTURE = "EMPTY_CAPTURE"
NO_TRANSCRIPT = "NO_TRANSCRIPT"
NETWORK_ERROR = "NETWORK_ERROR"
AUTH_FAILED = "AUTH_FAILED"
ASR_PROTOCOL_ERROR = "ASR_PROTOCOL_ERROR"
NOT_CONFIGURED = "NOT_CONFIGURED"
REFINE_FAILED = "REFINE_FAILED"
EMPTY_REFINEMENT = "EMPTY_REFINEMENT"
NO_ACTIVE_TARGET = "NO_ACTIVE_TARGET"
PIPELINE_ERROR = "PIPELINE_ERROR"
CANCELLED = "CANCELLED"

ERROR_MESSAGES = {
    PERMISSION_DENIED: "Error accessing microphone. Please check permissions.",
    EMPTY_CAPTURE: "Nothing was recorded.",
    NO_TRANSCRIPT: "No speech was recognized.",
    NETWORK_ERROR: "Network failed, please retry.",
    AUTH_FAILED: "Speech API key is invalid.",
    ASR_PROTOCOL_ERROR: "Speech service response is invalid.",
    NOT_CONFIGURED: "Generative AI API key is not configured.",
    REFINE_FAILED: "Text refinement failed, please retry.",
    EMPTY_REFINEMENT: "Refinement returned no text.",
    NO_ACTIVE_TARGET: "No active input target.",
    PIPELINE_ERROR: "Error processing audio. Please check the log for details.",
    CANCELLED: "Recording cancelled.",
}


class DictationError(Exception):
    """Base class for failures that end the current run but not the process."""

    code = PIPELINE_ERROR

    def __init__(self, message: str = "", code: Optional[str] = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(message or ERROR_MESSAGES.get(self.code, self.code))

    @property
    def user_message(self) -> str:
        return ERROR_MESSAGES.get(self.code, str(self))


class AudioCaptureError(DictationError):
    code = PERMISSION_DENIED


class EmptyCaptureError(DictationError):
    code = EMPTY_CAPTURE


class NoTranscriptError(DictationError):
    code = NO_TRANSCRIPT


class TranscriptionServiceError(DictationError):
    code = ASR_PROTOCOL_ERROR


class NotConfiguredError(DictationError):
    code = NOT_CONFIGURED


class RefinementServiceError(DictationError):
    code = REFINE_FAILED


class DeliveryError(DictationError):
    code = NO_ACTIVE_TARGET
