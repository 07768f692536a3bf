"""Session controller: sequences recognition, translation and playback."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import deque
from typing import Callable

from voice_translator.errors import PlaybackBusy
from voice_translator.events import Effect, EventKind, SessionEvent, apply_event
from voice_translator.history import HistoryBuffer
from voice_translator.languages import DEFAULT_SOURCE, DEFAULT_TARGET, LanguageTag
from voice_translator.models import (
    HistoryEntry,
    PendingTranslation,
    PlaybackOutcome,
    Session,
    SessionSnapshot,
    SessionState,
    TranslationOutcome,
)
from voice_translator.timer import RecordingTimer
from voice_translator.translation import NOT_AVAILABLE, TranslationResolver
from voice_translator.voice.capability import CapabilityProbe, CapabilityReport
from voice_translator.voice.interfaces import RecognitionCapability
from voice_translator.voice.playback import PlaybackController
from voice_translator.voice.recognition import RecognitionEvent, RecognitionEventKind, RecognitionSessionAdapter

SessionListener = Callable[[SessionSnapshot], None]

_RECOGNITION_EVENT_KINDS = {
    RecognitionEventKind.RESULT: EventKind.RECOGNITION_RESULT,
    RecognitionEventKind.ERROR: EventKind.RECOGNITION_ERROR,
    RecognitionEventKind.END: EventKind.RECOGNITION_END,
}

_ERROR_SURFACING_EVENTS = (
    EventKind.START_REQUESTED,
    EventKind.CAPABILITY_PROBED,
    EventKind.RECOGNITION_ERROR,
    EventKind.RECOGNITION_START_FAILED,
)


class SessionController:
    """Owns the single live Session and reacts to user intents and engine callbacks.

    All methods must be called from the event loop thread. Events raised while
    another event is being processed are queued and handled in order once the
    current transition and its notification have completed.
    """

    def __init__(
        self,
        *,
        recognition: RecognitionCapability | None,
        resolver: TranslationResolver,
        playback: PlaybackController,
        probe: CapabilityProbe | None = None,
        history: HistoryBuffer | None = None,
        source_language: LanguageTag | str = DEFAULT_SOURCE,
        target_language: LanguageTag | str = DEFAULT_TARGET,
        timer_interval_seconds: float = 1.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger("voice_translator.controller")
        self._session = Session(
            source_language=LanguageTag.parse(source_language),
            target_language=LanguageTag.parse(target_language),
        )
        self._resolver = resolver
        self._playback = playback
        self._probe = probe or CapabilityProbe()
        self._history = history if history is not None else HistoryBuffer()
        self._timer = RecordingTimer(self._on_tick, interval_seconds=timer_interval_seconds)
        self._adapter: RecognitionSessionAdapter | None = None
        if recognition is not None:
            self._adapter = RecognitionSessionAdapter(recognition, self._on_recognition_event)
            self._adapter.configure(self._session.source_language.code)

        self._listeners: list[SessionListener] = []
        self._queue: deque[SessionEvent] = deque()
        self._draining = False
        self._tickets = itertools.count(1)
        self._entry_ids = itertools.count(1)
        self._translation_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def history(self) -> HistoryBuffer:
        return self._history

    @property
    def timer_running(self) -> bool:
        return self._timer.running

    @property
    def recognition_generation(self) -> int:
        return self._adapter.generation if self._adapter else 0

    @property
    def capability_present(self) -> bool:
        report = self._probe.cached
        return bool(report is not None and report.recognition and self._adapter is not None)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot.of(self._session, self._history.snapshot())

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for snapshots; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def initialize(self) -> CapabilityReport:
        """Probe the environment once and cache the result."""
        report = self._probe.run()
        self._dispatch(
            SessionEvent(EventKind.CAPABILITY_PROBED, capability_present=report.recognition and self._adapter is not None)
        )
        return report

    # User intents

    def start(self) -> None:
        self._dispatch(SessionEvent(EventKind.START_REQUESTED, capability_present=self.capability_present))

    def stop(self) -> None:
        self._dispatch(SessionEvent(EventKind.STOP_REQUESTED))

    def toggle_recording(self) -> None:
        if self._session.state == SessionState.LISTENING:
            self.stop()
        else:
            self.start()

    def swap_languages(self) -> None:
        self._dispatch(SessionEvent(EventKind.SWAP_REQUESTED))

    def set_source_language(self, language: LanguageTag | str) -> None:
        self._dispatch(SessionEvent(EventKind.SOURCE_LANGUAGE_CHANGED, language=LanguageTag.parse(language)))

    def set_target_language(self, language: LanguageTag | str) -> None:
        self._dispatch(SessionEvent(EventKind.TARGET_LANGUAGE_CHANGED, language=LanguageTag.parse(language)))

    def reset(self) -> None:
        self._dispatch(SessionEvent(EventKind.RESET_REQUESTED))

    async def play(self) -> PlaybackOutcome | None:
        """Speak the current translation; raises ``PlaybackBusy`` if one is already playing."""
        if self._playback.busy:
            raise PlaybackBusy("Playback is already in progress")
        text = self._session.translated_text
        if not text:
            return None

        language = self._session.target_language
        if self._session.state == SessionState.READY:
            self._dispatch(SessionEvent(EventKind.PLAYBACK_STARTED))
        try:
            return await self._playback.speak(text, language)
        finally:
            self._dispatch(SessionEvent(EventKind.PLAYBACK_FINISHED))

    async def wait_idle(self) -> None:
        """Wait for an in-flight translation to be folded into the session."""
        while self._translation_task is not None and not self._translation_task.done():
            await asyncio.shield(self._translation_task)

    def close(self) -> None:
        self._timer.cancel()
        if self._adapter is not None:
            self._adapter.abort()
        if self._translation_task is not None:
            self._translation_task.cancel()
            self._translation_task = None

    # Event processing

    def _dispatch(self, event: SessionEvent) -> None:
        self._queue.append(event)
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                self._process(self._queue.popleft())
        finally:
            self._draining = False

    def _process(self, event: SessionEvent) -> None:
        if event.generation is not None and event.generation != self.recognition_generation:
            self._logger.debug(
                "stale_recognition_event_dropped",
                extra={"event": event.kind.value, "generation": event.generation, "current": self.recognition_generation},
            )
            return

        previous = self._session.state
        effects = apply_event(self._session, event)
        if effects is None:
            self._logger.debug("event_ignored", extra={"event": event.kind.value, "state": previous.value})
            return

        if previous != self._session.state:
            self._logger.info(
                "session_transition",
                extra={"event": event.kind.value, "from_state": previous.value, "to_state": self._session.state.value},
            )
        if event.kind in _ERROR_SURFACING_EVENTS and self._session.error is not None:
            self._logger.warning("session_error", extra={"kind": self._session.error.kind, "error_code": event.error_code})

        for effect in effects:
            self._run_effect(effect)
        self._notify()

    def _run_effect(self, effect: Effect) -> None:
        if effect == Effect.START_TIMER:
            self._timer.start()
        elif effect == Effect.STOP_TIMER:
            self._timer.cancel()
        elif effect == Effect.START_RECOGNITION:
            self._start_recognition()
        elif effect == Effect.STOP_RECOGNITION:
            if self._adapter is not None:
                self._adapter.stop()
        elif effect == Effect.ABORT_RECOGNITION:
            if self._adapter is not None:
                self._adapter.abort()
        elif effect == Effect.REBIND_RECOGNIZER:
            if self._adapter is not None:
                self._adapter.configure(self._session.source_language.code)
        elif effect == Effect.REQUEST_TRANSLATION:
            self._queue.append(SessionEvent(EventKind.TRANSLATION_STARTED, ticket=next(self._tickets)))
        elif effect == Effect.TRANSLATE:
            self._begin_translation()
        elif effect == Effect.APPEND_HISTORY:
            self._append_history()
        elif effect == Effect.CLEAR_HISTORY:
            self._history.clear()

    def _start_recognition(self) -> None:
        if self._adapter is None:
            self._queue.append(
                SessionEvent(EventKind.RECOGNITION_START_FAILED, message="No speech recognition capability is configured.")
            )
            return
        try:
            self._adapter.start()
        except Exception as exc:  # noqa: BLE001 - engine start failures return the session to a retryable state.
            self._logger.exception("recognition_start_failed")
            self._queue.append(
                SessionEvent(EventKind.RECOGNITION_START_FAILED, message=f"Speech recognition could not start: {exc}")
            )

    def _begin_translation(self) -> None:
        pending = self._session.pending_translation
        if pending is None:
            return
        self._logger.info(
            "translation_requested",
            extra={"ticket": pending.ticket, "source": pending.source_language.code, "target": pending.target_language.code},
        )
        self._translation_task = asyncio.get_running_loop().create_task(
            self._translate(pending), name=f"translation-{pending.ticket}"
        )

    async def _translate(self, pending: PendingTranslation) -> None:
        try:
            outcome = await self._resolver.resolve(pending.text, pending.source_language, pending.target_language)
        except Exception:  # noqa: BLE001 - a translation must always complete the pipeline.
            self._logger.exception("translation_resolver_failed", extra={"ticket": pending.ticket})
            outcome = TranslationOutcome(text=NOT_AVAILABLE, was_fallback=True)
        self._dispatch(SessionEvent(EventKind.TRANSLATION_RESOLVED, outcome=outcome, ticket=pending.ticket))

    def _append_history(self) -> None:
        pending = self._session.pending_translation
        if pending is None:
            return
        entry = HistoryEntry(
            id=f"tx-{next(self._entry_ids)}",
            original_text=pending.text,
            translated_text=self._session.translated_text,
            source_language=pending.source_language,
            target_language=pending.target_language,
        )
        self._history.append(entry)
        self._logger.info("history_appended", extra={"entry_id": entry.id, "history_size": len(self._history)})

    def _on_recognition_event(self, event: RecognitionEvent) -> None:
        self._dispatch(
            SessionEvent(
                _RECOGNITION_EVENT_KINDS[event.kind],
                result=event.result,
                error_code=event.error_code,
                generation=event.generation,
            )
        )

    def _on_tick(self) -> None:
        self._dispatch(SessionEvent(EventKind.TIMER_TICK))

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # noqa: BLE001 - a broken listener must not corrupt the session.
                self._logger.exception("session_listener_failed")
