"""Session events and the transition function that folds them into the Session.

``apply_event`` is the only code that mutates a :class:`Session`. It never
performs I/O itself; it returns the side effects the controller must run
(timers, recognizer calls, translation requests, history updates). A return
value of ``None`` means the event does not apply in the current state and was
ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from voice_translator.errors import RecognitionError
from voice_translator.languages import LanguageTag
from voice_translator.models import (
    PendingTranslation,
    RecognitionResult,
    Session,
    SessionError,
    SessionState,
    TranslationOutcome,
)

UNSUPPORTED_MESSAGE = "Speech recognition is not supported in this environment."


class EventKind(str, Enum):
    START_REQUESTED = "start_requested"
    STOP_REQUESTED = "stop_requested"
    RESET_REQUESTED = "reset_requested"
    SWAP_REQUESTED = "swap_requested"
    SOURCE_LANGUAGE_CHANGED = "source_language_changed"
    TARGET_LANGUAGE_CHANGED = "target_language_changed"
    CAPABILITY_PROBED = "capability_probed"
    RECOGNITION_START_FAILED = "recognition_start_failed"
    RECOGNITION_RESULT = "recognition_result"
    RECOGNITION_ERROR = "recognition_error"
    RECOGNITION_END = "recognition_end"
    TRANSLATION_STARTED = "translation_started"
    TRANSLATION_RESOLVED = "translation_resolved"
    TIMER_TICK = "timer_tick"
    PLAYBACK_STARTED = "playback_started"
    PLAYBACK_FINISHED = "playback_finished"


class Effect(str, Enum):
    START_TIMER = "start_timer"
    STOP_TIMER = "stop_timer"
    START_RECOGNITION = "start_recognition"
    STOP_RECOGNITION = "stop_recognition"
    ABORT_RECOGNITION = "abort_recognition"
    REBIND_RECOGNIZER = "rebind_recognizer"
    REQUEST_TRANSLATION = "request_translation"
    TRANSLATE = "translate"
    APPEND_HISTORY = "append_history"
    CLEAR_HISTORY = "clear_history"


@dataclass(frozen=True, slots=True)
class SessionEvent:
    kind: EventKind
    capability_present: bool = True
    language: LanguageTag | None = None
    result: RecognitionResult | None = None
    error_code: str | None = None
    message: str | None = None
    outcome: TranslationOutcome | None = None
    ticket: int | None = None
    generation: int | None = None


_STARTABLE = (SessionState.IDLE, SessionState.READY, SessionState.ERROR)


def apply_event(session: Session, event: SessionEvent) -> list[Effect] | None:
    """Apply ``event`` to ``session`` in place and return the effects to run."""
    handler = _HANDLERS[event.kind]
    return handler(session, event)


def _on_start(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state not in _STARTABLE and session.state != SessionState.UNSUPPORTED:
        return None
    if not event.capability_present:
        session.state = SessionState.UNSUPPORTED
        session.error = SessionError(kind="capability_unsupported", message=UNSUPPORTED_MESSAGE)
        return []
    if session.state == SessionState.UNSUPPORTED:
        return None

    session.original_text = ""
    session.translated_text = ""
    session.confidence = None
    session.was_fallback = False
    session.error = None
    session.elapsed_seconds = 0
    session.state = SessionState.LISTENING
    return [Effect.START_TIMER, Effect.START_RECOGNITION]


def _on_start_failed(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.LISTENING:
        return None
    session.state = SessionState.ERROR
    session.elapsed_seconds = 0
    session.error = SessionError(
        kind="recognition_error",
        message=event.message or "Speech recognition could not be started.",
    )
    return [Effect.STOP_TIMER]


def _on_stop(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state == SessionState.LISTENING:
        session.state = SessionState.IDLE
        session.elapsed_seconds = 0
        return [Effect.STOP_TIMER, Effect.STOP_RECOGNITION]
    if session.state in (SessionState.READY, SessionState.ERROR):
        session.state = SessionState.IDLE
        session.elapsed_seconds = 0
        session.error = None
        return [Effect.STOP_TIMER]
    return None


def _on_reset(session: Session, event: SessionEvent) -> list[Effect] | None:
    effects = [Effect.STOP_TIMER]
    if session.state == SessionState.LISTENING:
        effects.append(Effect.ABORT_RECOGNITION)
    effects.append(Effect.CLEAR_HISTORY)

    session.state = SessionState.IDLE
    session.original_text = ""
    session.translated_text = ""
    session.confidence = None
    session.was_fallback = False
    session.error = None
    session.elapsed_seconds = 0
    session.pending_translation = None
    return effects


def _leave_listening_for_rebind(session: Session) -> list[Effect]:
    if session.state != SessionState.LISTENING:
        return [Effect.REBIND_RECOGNIZER]
    session.state = SessionState.IDLE
    session.elapsed_seconds = 0
    return [Effect.STOP_TIMER, Effect.ABORT_RECOGNITION, Effect.REBIND_RECOGNIZER]


def _on_swap(session: Session, event: SessionEvent) -> list[Effect] | None:
    session.source_language, session.target_language = session.target_language, session.source_language
    if session.original_text and session.translated_text:
        session.original_text, session.translated_text = session.translated_text, session.original_text
    return _leave_listening_for_rebind(session)


def _on_source_changed(session: Session, event: SessionEvent) -> list[Effect] | None:
    if event.language is None or event.language == session.source_language:
        return None
    session.source_language = event.language
    return _leave_listening_for_rebind(session)


def _on_target_changed(session: Session, event: SessionEvent) -> list[Effect] | None:
    if event.language is None or event.language == session.target_language:
        return None
    session.target_language = event.language
    return []


def _on_capability_probed(session: Session, event: SessionEvent) -> list[Effect] | None:
    if not event.capability_present and session.state == SessionState.IDLE:
        session.state = SessionState.UNSUPPORTED
        session.error = SessionError(kind="capability_unsupported", message=UNSUPPORTED_MESSAGE)
        return []
    if event.capability_present and session.state == SessionState.UNSUPPORTED:
        session.state = SessionState.IDLE
        session.error = None
        return []
    return None


def _on_result(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.LISTENING or event.result is None:
        return None
    text = event.result.text.strip()
    if not text:
        return None

    session.original_text = text
    session.confidence = max(0, min(100, round(event.result.confidence * 100)))
    session.state = SessionState.RECOGNIZED
    return [Effect.STOP_TIMER, Effect.REQUEST_TRANSLATION]


def _on_recognition_error(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.LISTENING:
        return None
    code = event.error_code or "unknown"
    session.state = SessionState.IDLE
    session.elapsed_seconds = 0
    session.error = SessionError(kind="recognition_error", message=event.message or str(RecognitionError(code)))
    return [Effect.STOP_TIMER]


def _on_recognition_end(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state == SessionState.LISTENING:
        session.state = SessionState.IDLE
    session.elapsed_seconds = 0
    return [Effect.STOP_TIMER]


def _on_translation_started(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.RECOGNIZED or event.ticket is None:
        return None
    session.pending_translation = PendingTranslation(
        ticket=event.ticket,
        text=session.original_text,
        source_language=session.source_language,
        target_language=session.target_language,
    )
    session.state = SessionState.TRANSLATING
    return [Effect.TRANSLATE]


def _on_translation_resolved(session: Session, event: SessionEvent) -> list[Effect] | None:
    pending = session.pending_translation
    if session.state != SessionState.TRANSLATING or pending is None or event.outcome is None:
        return None
    if pending.ticket != event.ticket:
        return None

    session.translated_text = event.outcome.text
    session.was_fallback = event.outcome.was_fallback
    session.state = SessionState.READY
    return [Effect.APPEND_HISTORY]


def _on_tick(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.LISTENING:
        return None
    session.elapsed_seconds += 1
    return []


def _on_playback_started(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.READY:
        return None
    session.state = SessionState.SPEAKING
    return []


def _on_playback_finished(session: Session, event: SessionEvent) -> list[Effect] | None:
    if session.state != SessionState.SPEAKING:
        return None
    session.state = SessionState.READY
    return []


_HANDLERS: dict[EventKind, Callable[[Session, SessionEvent], list[Effect] | None]] = {
    EventKind.START_REQUESTED: _on_start,
    EventKind.STOP_REQUESTED: _on_stop,
    EventKind.RESET_REQUESTED: _on_reset,
    EventKind.SWAP_REQUESTED: _on_swap,
    EventKind.SOURCE_LANGUAGE_CHANGED: _on_source_changed,
    EventKind.TARGET_LANGUAGE_CHANGED: _on_target_changed,
    EventKind.CAPABILITY_PROBED: _on_capability_probed,
    EventKind.RECOGNITION_START_FAILED: _on_start_failed,
    EventKind.RECOGNITION_RESULT: _on_result,
    EventKind.RECOGNITION_ERROR: _on_recognition_error,
    EventKind.RECOGNITION_END: _on_recognition_end,
    EventKind.TRANSLATION_STARTED: _on_translation_started,
    EventKind.TRANSLATION_RESOLVED: _on_translation_resolved,
    EventKind.TIMER_TICK: _on_tick,
    EventKind.PLAYBACK_STARTED: _on_playback_started,
    EventKind.PLAYBACK_FINISHED: _on_playback_finished,
}
