"""Transcribe → refine → deliver, with guaranteed cleanup."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from errors import (
    EMPTY_REFINEMENT,
    DeliveryError,
    NoTranscriptError,
    RefinementServiceError,
)
from interfaces import DeliverySink, Refiner, Transcriber
from models import AudioBlob, DictationConfig

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    def __init__(
        self,
        transcriber: Transcriber,
        refiner: Refiner,
        sink: DeliverySink,
    ) -> None:
        self._transcriber = transcriber
        self._refiner = refiner
        self._sink = sink

    def run(
        self,
        audio: AudioBlob,
        config: DictationConfig,
        on_settled: Optional[Callable[[], None]] = None,
    ) -> str:
        """Run one capture through the services and deliver the result.

        Any stage failure propagates unchanged and later stages are skipped;
        the raw transcript is never delivered in place of refined text.
        ``on_settled`` runs exactly once, whatever the outcome.
        """
        try:
            transcript = self._transcriber.transcribe(
                audio, config.language_code, config.speech_api_key
            )
            if not transcript.strip():
                raise NoTranscriptError("recognition returned a blank transcript")
            logger.info("Transcription done (%d chars)", len(transcript))

            refined = self._refiner.refine(transcript, config.llm_api_key)
            if not refined.strip():
                raise RefinementServiceError(
                    "generation returned no text", code=EMPTY_REFINEMENT
                )
            logger.info("Refinement done (%d chars)", len(refined))

            self._deliver(refined)
            return refined
        finally:
            if on_settled is not None:
                on_settled()

    def _deliver(self, text: str) -> None:
        try:
            result = self._sink.replace_selection(text)
        except Exception as exc:
            raise DeliveryError(str(exc)) from exc
        if not result.success:
            raise DeliveryError(result.reason)
        logger.info("Delivered refined text")
