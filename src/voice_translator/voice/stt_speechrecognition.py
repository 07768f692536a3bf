"""Speech-to-text backend powered by ``speech_recognition``."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from voice_translator.errors import CapabilityUnsupported
from voice_translator.models import RecognitionResult
from voice_translator.voice.interfaces import EndCallback, ErrorCallback, RecognitionCapability, ResultCallback


def best_alternative(response: Any) -> RecognitionResult | None:
    """Pick the top transcript from a ``recognize_google(show_all=True)`` payload."""
    if not isinstance(response, dict):
        return None
    alternatives = response.get("alternative") or []
    if not alternatives:
        return None
    top = alternatives[0]
    text = str(top.get("transcript", "")).strip()
    if not text:
        return None
    return RecognitionResult(text=text, confidence=float(top.get("confidence", 0.0)))


class SpeechRecognitionHandle:
    """Single-use, single-utterance microphone capture.

    The microphone is read by ``Recognizer.listen_in_background``; the first
    phrase heard resolves a future on the event loop and the background
    listener is stopped. ``stop``/``abort`` call the listener's stopper, so the
    microphone is released without waiting for speech. Transcription runs in a
    worker thread. ``on_end`` fires exactly once however the capture finishes.
    """

    def __init__(
        self,
        sr: Any,
        *,
        language: str,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
        phrase_time_limit: float | None,
        timeout: float | None,
        adjust_noise_seconds: float,
        sample_rate: int,
        chunk_size: int,
        logger: logging.Logger,
    ) -> None:
        self._sr = sr
        self._language = language
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end
        self._phrase_time_limit = phrase_time_limit
        self._timeout = timeout
        self._adjust_noise_seconds = max(0.0, adjust_noise_seconds)
        self._sample_rate = sample_rate
        self._chunk_size = chunk_size
        self._logger = logger
        self._task: asyncio.Task[None] | None = None
        self._heard: asyncio.Future[Any] | None = None
        self._stop_listening: Callable[..., None] | None = None
        self._cancelled = False
        self._aborted = False

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("Recognizer handles are single-use; configure a new one")
        loop = asyncio.get_running_loop()
        self._heard = loop.create_future()
        self._task = loop.create_task(self._run(), name="speech-recognition")

    def stop(self) -> None:
        self._logger.debug("speech_recognition_stop", extra={"language": self._language})
        self._cancel()

    def abort(self) -> None:
        self._aborted = True
        self._cancel()

    def _cancel(self) -> None:
        self._cancelled = True
        self._release_microphone()
        if self._heard is not None and not self._heard.done():
            self._heard.set_result(None)

    def _release_microphone(self) -> None:
        stop_listening, self._stop_listening = self._stop_listening, None
        if stop_listening is not None:
            stop_listening(wait_for_stop=False)

    async def _run(self) -> None:
        error_code: str | None = None
        result: RecognitionResult | None = None
        try:
            try:
                result = await self._capture()
            except (asyncio.TimeoutError, self._sr.WaitTimeoutError):
                error_code = "no-speech"
            except self._sr.RequestError:
                self._logger.warning("speech_recognition_request_failed", extra={"language": self._language})
                error_code = "network"
            except OSError:
                self._logger.exception("speech_recognition_audio_failed", extra={"language": self._language})
                error_code = "audio-capture"
            except Exception:  # noqa: BLE001 - any engine failure still has to end the capture.
                self._logger.exception("speech_recognition_failed", extra={"language": self._language})
                error_code = "unknown"

            if not self._aborted:
                if error_code is not None:
                    self._on_error(error_code)
                elif result is not None:
                    self._on_result(result)
        finally:
            self._release_microphone()
            self._on_end()

    async def _capture(self) -> RecognitionResult | None:
        recognizer, stop_listening = await asyncio.to_thread(self._listen_in_background, asyncio.get_running_loop())
        self._stop_listening = stop_listening
        if self._cancelled:
            return None

        audio = await asyncio.wait_for(self._heard, timeout=self._timeout)
        self._release_microphone()
        if audio is None or self._aborted:
            return None
        return await asyncio.to_thread(self._recognize, recognizer, audio)

    def _listen_in_background(self, loop: asyncio.AbstractEventLoop) -> tuple[Any, Callable[..., None]]:
        recognizer = self._sr.Recognizer()
        microphone = self._sr.Microphone(sample_rate=self._sample_rate, chunk_size=self._chunk_size)
        if self._adjust_noise_seconds > 0:
            with microphone as source:
                recognizer.adjust_for_ambient_noise(source, duration=self._adjust_noise_seconds)

        def _phrase_heard(_recognizer: Any, audio: Any) -> None:
            loop.call_soon_threadsafe(self._resolve_heard, audio)

        stop_listening = recognizer.listen_in_background(
            microphone, _phrase_heard, phrase_time_limit=self._phrase_time_limit
        )
        return recognizer, stop_listening

    def _resolve_heard(self, audio: Any) -> None:
        if self._heard is not None and not self._heard.done():
            self._heard.set_result(audio)

    def _recognize(self, recognizer: Any, audio: Any) -> RecognitionResult | None:
        try:
            response = recognizer.recognize_google(audio, language=self._language, show_all=True)
        except self._sr.UnknownValueError:
            return None
        return best_alternative(response)


class SpeechRecognitionCapability(RecognitionCapability):
    """Creates microphone-backed recognizers using Google's web speech endpoint."""

    def __init__(
        self,
        *,
        phrase_time_limit: float | None = 10.0,
        timeout: float | None = 15.0,
        adjust_noise_seconds: float = 0.2,
        sample_rate: int = 16_000,
        chunk_size: int = 1024,
        logger: logging.Logger | None = None,
    ) -> None:
        try:
            import speech_recognition as sr
        except ImportError as exc:  # pragma: no cover - import guard
            raise CapabilityUnsupported(
                "Voice STT backend unavailable. Install extras with: pip install 'voice-translator[voice]'"
            ) from exc
        self._sr = sr
        self._phrase_time_limit = phrase_time_limit
        self._timeout = timeout
        self._adjust_noise_seconds = adjust_noise_seconds
        self._sample_rate = sample_rate
        self._chunk_size = chunk_size
        self._logger = logger or logging.getLogger("voice_translator.stt")

    def configure(
        self,
        language: str,
        *,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> SpeechRecognitionHandle:
        return SpeechRecognitionHandle(
            self._sr,
            language=language,
            on_result=on_result,
            on_error=on_error,
            on_end=on_end,
            phrase_time_limit=self._phrase_time_limit,
            timeout=self._timeout,
            adjust_noise_seconds=self._adjust_noise_seconds,
            sample_rate=self._sample_rate,
            chunk_size=self._chunk_size,
            logger=self._logger,
        )
