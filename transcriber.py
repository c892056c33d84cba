"""Speech-to-text client for the Google Cloud ``speech:recognize`` REST endpoint.

The finalized capture is a single LINEAR16 blob.  For transport it is
transcoded to Ogg/Opus (the codec browsers record in), base64 encoded and
posted together with the encoding, sample rate and language code.  Only the
first alternative of the first result is used.
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Optional

import requests

from errors import (
    ASR_PROTOCOL_ERROR,
    AUTH_FAILED,
    NETWORK_ERROR,
    EmptyCaptureError,
    NoTranscriptError,
    TranscriptionServiceError,
)
from models import CAPTURE_ENCODING, AudioBlob, TransportSettings

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import soundfile as sf
except Exception:  # pragma: no cover
    sf = None  # type: ignore

logger = logging.getLogger(__name__)


def _pcm_to_ogg_opus(pcm: bytes, sample_rate: int = 48000, channels: int = 1) -> bytes:
    """Transcode raw PCM16 bytes into an Ogg/Opus file held in memory."""
    if np is None or sf is None:
        raise TranscriptionServiceError(
            "soundfile is not installed", code=ASR_PROTOCOL_ERROR
        )
    frame_width = 2 * channels
    usable = len(pcm) - len(pcm) % frame_width
    samples = np.frombuffer(pcm[:usable], dtype=np.int16).reshape(-1, channels)
    buf = io.BytesIO()
    try:
        sf.write(buf, samples, sample_rate, format="OGG", subtype="OPUS")
    except Exception as exc:
        raise TranscriptionServiceError(
            f"Ogg/Opus encoding failed: {exc}", code=ASR_PROTOCOL_ERROR
        ) from exc
    return buf.getvalue()


class GoogleSpeechTranscriber:
    def __init__(
        self,
        settings: Optional[TransportSettings] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or TransportSettings()
        self._http = http or requests.Session()

    @property
    def settings(self) -> TransportSettings:
        return self._settings

    def transcribe(self, audio: AudioBlob, language_code: str, api_key: str) -> str:
        if not audio.data:
            raise EmptyCaptureError("transcribe requires a non-empty audio blob")

        payload = {
            "config": {
                "encoding": self._settings.encoding,
                "sampleRateHertz": self._settings.sample_rate_hertz,
                "languageCode": language_code,
            },
            "audio": {
                "content": base64.b64encode(self._encode_for_transport(audio)).decode("ascii"),
            },
        }

        logger.info(
            "Sending %d bytes of %s audio for recognition (%s)",
            len(audio.data),
            self._settings.encoding,
            language_code,
        )
        try:
            response = self._http.post(
                self._settings.recognize_url,
                params={"key": api_key},
                json=payload,
                timeout=self._settings.request_timeout_s,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise TranscriptionServiceError(str(exc), code=NETWORK_ERROR) from exc
        except requests.RequestException as exc:
            raise TranscriptionServiceError(str(exc)) from exc

        data = self._decode(response)
        return self._extract_transcript(data)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _encode_for_transport(self, audio: AudioBlob) -> bytes:
        target = self._settings.encoding
        if audio.encoding == target:
            return audio.data
        if audio.encoding == CAPTURE_ENCODING and target == "OGG_OPUS":
            return _pcm_to_ogg_opus(audio.data, audio.sample_rate_hertz, audio.channels)
        raise TranscriptionServiceError(
            f"cannot encode {audio.encoding} audio as {target}",
            code=ASR_PROTOCOL_ERROR,
        )

    def _decode(self, response: requests.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            if not response.ok:
                raise TranscriptionServiceError(
                    f"HTTP {response.status_code}", code=self._status_code(response)
                ) from exc
            raise TranscriptionServiceError(f"undecodable response: {exc}") from exc

        if not response.ok:
            message = ""
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                message = str(data["error"].get("message", ""))
            raise TranscriptionServiceError(
                f"HTTP {response.status_code}: {message}".rstrip(": "),
                code=self._status_code(response),
            )
        if not isinstance(data, dict):
            raise TranscriptionServiceError("response is not a JSON object")
        return data

    def _extract_transcript(self, data: dict[str, Any]) -> str:
        results = data.get("results") or []
        if not results:
            raise NoTranscriptError("recognition returned no results")
        try:
            transcript = results[0]["alternatives"][0]["transcript"]
        except (KeyError, IndexError, TypeError) as exc:
            raise TranscriptionServiceError(f"malformed recognition result: {exc!r}") from exc
        if not isinstance(transcript, str):
            raise TranscriptionServiceError("transcript is not a string")
        if not transcript.strip():
            raise NoTranscriptError("recognition returned a blank transcript")
        logger.info("Recognition returned %d characters", len(transcript))
        return transcript

    @staticmethod
    def _status_code(response: requests.Response) -> str:
        if response.status_code in (401, 403):
            return AUTH_FAILED
        return ASR_PROTOCOL_ERROR
