"""Contracts for the external speech recognition and synthesis engines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from voice_translator.models import RecognitionResult

ResultCallback = Callable[[RecognitionResult], None]
ErrorCallback = Callable[[str], None]
EndCallback = Callable[[], None]


class RecognizerHandle(Protocol):
    """One configured single-utterance recognizer instance."""

    def start(self) -> None:
        """Begin capturing; callbacks fire later on the event loop."""

    def stop(self) -> None:
        """Stop capturing; an utterance already heard may still be delivered."""

    def abort(self) -> None:
        """Cancel capturing and drop anything not yet delivered."""


class RecognitionCapability(Protocol):
    """Factory for recognizer handles bound to a source language."""

    def configure(
        self,
        language: str,
        *,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> RecognizerHandle:
        """Return a fresh recognizer bound to ``language``."""


@dataclass(frozen=True, slots=True)
class VoiceInfo:
    id: str
    name: str
    gender: str | None = None
    languages: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SpeechOptions:
    rate: float = 1.0
    pitch: float = 1.0
    voice: VoiceInfo | None = None


class SpeechSynthesizer(Protocol):
    """Converts text into audible speech."""

    def voices(self) -> list[VoiceInfo]:
        """Return the voices the engine can use."""

    def speak(self, text: str, *, language: str, options: SpeechOptions) -> None:
        """Speak ``text`` and block until playback ends; raise on engine failure."""
