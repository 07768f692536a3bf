"""Session state, value records and snapshots shared across the voice translator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from voice_translator.languages import DEFAULT_SOURCE, DEFAULT_TARGET, LanguageTag


class SessionState(str, Enum):
    """Lifecycle states of the voice translation session."""

    IDLE = "idle"
    LISTENING = "listening"
    RECOGNIZED = "recognized"
    TRANSLATING = "translating"
    READY = "ready"
    SPEAKING = "speaking"
    ERROR = "error"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class RecognitionResult:
    text: str
    confidence: float


@dataclass(frozen=True, slots=True)
class TranslationOutcome:
    text: str
    was_fallback: bool = False


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Completed exchange shown in the recent translations list."""

    id: str
    original_text: str
    translated_text: str
    source_language: LanguageTag
    target_language: LanguageTag
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True, slots=True)
class SessionError:
    kind: str
    message: str


@dataclass(frozen=True, slots=True)
class PendingTranslation:
    ticket: int
    text: str
    source_language: LanguageTag
    target_language: LanguageTag


@dataclass(slots=True)
class Session:
    """The live orchestration context; mutated only by the transition function."""

    source_language: LanguageTag = field(default_factory=lambda: LanguageTag(DEFAULT_SOURCE))
    target_language: LanguageTag = field(default_factory=lambda: LanguageTag(DEFAULT_TARGET))
    state: SessionState = SessionState.IDLE
    original_text: str = ""
    translated_text: str = ""
    confidence: int | None = None
    elapsed_seconds: int = 0
    was_fallback: bool = False
    error: SessionError | None = None
    pending_translation: PendingTranslation | None = None


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable view of the session handed to the presentation layer."""

    state: SessionState
    source_language: LanguageTag
    target_language: LanguageTag
    original_text: str
    translated_text: str
    confidence: int | None
    elapsed_seconds: int
    was_fallback: bool
    error: SessionError | None
    history: tuple[HistoryEntry, ...] = ()

    @classmethod
    def of(cls, session: Session, history: tuple[HistoryEntry, ...] = ()) -> SessionSnapshot:
        return cls(
            state=session.state,
            source_language=session.source_language,
            target_language=session.target_language,
            original_text=session.original_text,
            translated_text=session.translated_text,
            confidence=session.confidence,
            elapsed_seconds=session.elapsed_seconds,
            was_fallback=session.was_fallback,
            error=session.error,
            history=history,
        )

    @property
    def is_recording(self) -> bool:
        return self.state == SessionState.LISTENING


@dataclass(frozen=True, slots=True)
class PlaybackOutcome:
    completed: bool
    simulated: bool = False
    voice: str | None = None
    error: str | None = None


def format_elapsed(seconds: int) -> str:
    """Render a recording duration as ``m:ss``."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
