"""Generation-tagged wrapper around the speech recognition capability."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from voice_translator.errors import AlreadyActive
from voice_translator.models import RecognitionResult
from voice_translator.voice.interfaces import RecognitionCapability, RecognizerHandle


class RecognitionEventKind(str, Enum):
    RESULT = "result"
    ERROR = "error"
    END = "end"


@dataclass(frozen=True, slots=True)
class RecognitionEvent:
    """Normalized recognizer callback tagged with the adapter generation that produced it."""

    kind: RecognitionEventKind
    generation: int
    result: RecognitionResult | None = None
    error_code: str | None = None


class RecognitionSessionAdapter:
    """Owns the current recognizer handle and stamps its events with a generation id.

    Every ``configure()`` and every new activation binds a fresh handle and
    bumps the generation, so callbacks from an older handle can be told apart
    from the current one by whoever consumes the events.
    """

    def __init__(
        self,
        capability: RecognitionCapability,
        sink: Callable[[RecognitionEvent], None],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._capability = capability
        self._sink = sink
        self._logger = logger or logging.getLogger("voice_translator.recognition")
        self._generation = 0
        self._language: str | None = None
        self._handle: RecognizerHandle | None = None
        self._active = False
        self._fresh = False
        self._terminal_delivered = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def language(self) -> str | None:
        return self._language

    @property
    def active(self) -> bool:
        return self._active

    def configure(self, language: str) -> int:
        """Bind a new recognizer for ``language``, aborting any running capture first."""
        self.abort()
        self._language = language
        self._bind()
        return self._generation

    def start(self) -> int:
        if self._language is None:
            raise RuntimeError("Recognition adapter is not configured with a language")
        if self._active:
            raise AlreadyActive("Speech recognition is already running")

        if not self._fresh:
            self._bind()
        self._fresh = False
        self._terminal_delivered = False
        self._active = True
        try:
            self._handle.start()
        except Exception:
            self._active = False
            raise
        self._logger.info("recognition_started", extra={"generation": self._generation, "language": self._language})
        return self._generation

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._handle.stop()
        self._logger.info("recognition_stop_requested", extra={"generation": self._generation})

    def abort(self) -> None:
        if not self._active:
            return
        self._active = False
        self._handle.abort()
        self._logger.info("recognition_abort_requested", extra={"generation": self._generation})

    def _bind(self) -> None:
        self._generation += 1
        generation = self._generation
        self._handle = self._capability.configure(
            self._language,
            on_result=lambda result: self._on_result(generation, result),
            on_error=lambda code: self._on_error(generation, code),
            on_end=lambda: self._on_end(generation),
        )
        self._fresh = True
        self._active = False
        self._terminal_delivered = False
        self._logger.debug("recognizer_bound", extra={"generation": generation, "language": self._language})

    def _claim_terminal(self, generation: int) -> bool:
        if generation != self._generation:
            return True
        if self._terminal_delivered:
            self._logger.debug("duplicate_terminal_event_dropped", extra={"generation": generation})
            return False
        self._terminal_delivered = True
        return True

    def _on_result(self, generation: int, result: RecognitionResult) -> None:
        if self._claim_terminal(generation):
            self._sink(RecognitionEvent(RecognitionEventKind.RESULT, generation, result=result))

    def _on_error(self, generation: int, code: str) -> None:
        if self._claim_terminal(generation):
            self._sink(RecognitionEvent(RecognitionEventKind.ERROR, generation, error_code=code))

    def _on_end(self, generation: int) -> None:
        if generation == self._generation:
            self._active = False
        self._sink(RecognitionEvent(RecognitionEventKind.END, generation))
