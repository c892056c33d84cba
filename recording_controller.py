"""State-machine based recording orchestration."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Callable, Optional

from audio_buffer import AudioBuffer
from errors import (
    CANCELLED,
    ERROR_MESSAGES,
    PIPELINE_ERROR,
    AudioCaptureError,
    DictationError,
)
from interfaces import Recorder
from models import AudioBlob, AudioFrame, DictationConfig, SessionState
from pipeline import PipelineOrchestrator

logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionState, SessionState], None]
NoticeCallback = Callable[[str], None]
ErrorCallback = Callable[[str, str], None]
ConfigSource = Callable[[], DictationConfig]


@dataclass
class Session:
    session_id: int
    config: DictationConfig
    buffer: AudioBuffer
    audio_queue: Queue
    capture_done: threading.Event = field(default_factory=threading.Event)
    stop_requested: bool = False
    audio: Optional[AudioBlob] = None
    cleared: bool = False

    def finalize(self) -> AudioBlob:
        self.audio = self.buffer.finalize()
        return self.audio

    def clear(self) -> None:
        self.buffer.clear()
        self.audio = None
        self.cleared = True


class RecordingController:
    def __init__(
        self,
        recorder: Recorder,
        pipeline: PipelineOrchestrator,
        config_source: ConfigSource,
        finalize_timeout_s: float = 3.0,
        queue_maxsize: int = 0,
        poll_interval_s: float = 0.2,
        on_state_change: Optional[StateCallback] = None,
        on_notice: Optional[NoticeCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._recorder = recorder
        self._pipeline = pipeline
        self._config_source = config_source
        self._finalize_timeout_s = finalize_timeout_s
        self._queue_maxsize = queue_maxsize
        self._poll_interval_s = poll_interval_s
        self._on_state_change = on_state_change
        self._on_notice = on_notice
        self._on_error = on_error

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._session: Optional[Session] = None
        self._session_counter = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def active_session(self) -> Optional[Session]:
        return self._session

    def toggle(self) -> None:
        with self._lock:
            state = self._state
        if state == SessionState.IDLE:
            self.start()
        elif state == SessionState.RECORDING:
            self.stop()

    def start(self) -> None:
        with self._lock:
            if self._state != SessionState.IDLE:
                return
            config = self._config_source()
            audio_queue: Queue[AudioFrame | None] = Queue(maxsize=self._queue_maxsize)
            try:
                self._recorder.start(audio_queue)
            except AudioCaptureError as exc:
                self._report(exc)
                return
            except Exception as exc:
                self._report(AudioCaptureError(str(exc)))
                return

            self._session_counter += 1
            session = Session(
                session_id=self._session_counter,
                config=config,
                buffer=AudioBuffer(),
                audio_queue=audio_queue,
            )
            self._session = session
            self._transition(SessionState.RECORDING)
            threading.Thread(
                target=self._capture_worker,
                args=(session,),
                name=f"capture-{session.session_id}",
                daemon=True,
            ).start()
            self._notice("Recording started...")

    def stop(self) -> None:
        with self._lock:
            session = self._session
            if self._state != SessionState.RECORDING or session is None:
                return
            if session.stop_requested:
                return
            session.stop_requested = True
            self._safe_stop_recorder()
            self._notice("Recording stopped.")

        confirmed = session.capture_done.wait(timeout=self._finalize_timeout_s)

        with self._lock:
            if self._session is not session:
                return
            if not confirmed:
                self._abort(session, AudioCaptureError("capture device did not confirm stop"))
                return
            try:
                audio = session.finalize()
            except DictationError as exc:
                self._abort(session, exc)
                return
            self._transition(SessionState.PROCESSING)

        try:
            self._pipeline.run(audio, session.config, on_settled=session.clear)
        except DictationError as exc:
            self._report(exc)
        except Exception:
            logger.exception("Unexpected pipeline failure")
            self._emit_error(PIPELINE_ERROR, ERROR_MESSAGES[PIPELINE_ERROR])
        finally:
            with self._lock:
                self._session = None
                self._transition(SessionState.IDLE)

    def cancel(self, reason: str) -> None:
        with self._lock:
            session = self._session
            if self._state != SessionState.RECORDING or session is None:
                return
            self._safe_stop_recorder()
            self._abort(session, DictationError(reason, code=CANCELLED))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _capture_worker(self, session: Session) -> None:
        """Drain the segment queue until the recorder's end-of-capture sentinel."""
        while True:
            try:
                frame = session.audio_queue.get(timeout=self._poll_interval_s)
            except Empty:
                if self._session is not session:
                    return
                continue
            if frame is None:
                session.capture_done.set()
                return
            self._append_segment(session, frame)

    def _append_segment(self, session: Session, frame: AudioFrame) -> None:
        with self._lock:
            if self._session is not session or self._state != SessionState.RECORDING:
                logger.debug("Dropping segment outside of recording")
                return
            session.buffer.append(frame.pcm16_bytes)

    def _abort(self, session: Session, error: DictationError) -> None:
        session.clear()
        self._session = None
        self._report(error)
        self._transition(SessionState.IDLE)

    def _report(self, error: DictationError) -> None:
        logger.warning("%s: %s", error.code, error)
        self._emit_error(error.code, error.user_message)

    def _emit_error(self, code: str, message: str) -> None:
        if self._on_error:
            self._on_error(code, message)

    def _notice(self, message: str) -> None:
        logger.info(message)
        if self._on_notice:
            self._on_notice(message)

    def _safe_stop_recorder(self) -> None:
        try:
            self._recorder.stop()
        except Exception:
            logger.exception("Recorder failed to stop cleanly")

    def _transition(self, to_state: SessionState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        logger.info("State %s -> %s", from_state.value, to_state.value)
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
