"""Text-to-speech playback with voice selection and a single-outstanding-request guard."""

from __future__ import annotations

import asyncio
import logging

from voice_translator.errors import PlaybackBusy
from voice_translator.languages import LanguageTag
from voice_translator.models import PlaybackOutcome
from voice_translator.voice.interfaces import SpeechOptions, SpeechSynthesizer, VoiceInfo

DEFAULT_PREFERRED_VOICE = "Google US English"


def select_voice(voices: list[VoiceInfo], preferred_name: str | None = None) -> VoiceInfo | None:
    """Exact preferred name first, then any voice flagged female, else the engine default."""
    if preferred_name:
        for voice in voices:
            if voice.name == preferred_name:
                return voice
    for voice in voices:
        if (voice.gender or "").lower() == "female":
            return voice
    for voice in voices:
        if "female" in voice.name.lower():
            return voice
    return None


class PlaybackController:
    """Speaks translated text; at most one playback may be outstanding."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizer | None,
        *,
        rate: float = 0.8,
        pitch: float = 1.0,
        preferred_voice: str | None = DEFAULT_PREFERRED_VOICE,
        simulated_seconds: float = 2.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._rate = rate
        self._pitch = pitch
        self._preferred_voice = preferred_voice
        self._simulated_seconds = max(0.0, simulated_seconds)
        self._logger = logger or logging.getLogger("voice_translator.playback")
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def simulated(self) -> bool:
        return self._synthesizer is None

    async def speak(self, text: str, language: LanguageTag | str) -> PlaybackOutcome | None:
        """Speak ``text`` in ``language``; returns ``None`` when there is nothing to say."""
        if self._busy:
            raise PlaybackBusy("Playback is already in progress")

        normalized = " ".join(text.split())
        if not normalized:
            return None

        self._busy = True
        try:
            if self._synthesizer is None:
                self._logger.info("playback_simulated", extra={"seconds": self._simulated_seconds})
                await asyncio.sleep(self._simulated_seconds)
                return PlaybackOutcome(completed=True, simulated=True)

            voice = self._choose_voice()
            options = SpeechOptions(rate=self._rate, pitch=self._pitch, voice=voice)
            voice_name = voice.name if voice else None
            self._logger.info("playback_started", extra={"language": str(language), "voice": voice_name})
            try:
                await asyncio.to_thread(self._synthesizer.speak, normalized, language=str(language), options=options)
            except Exception as exc:  # noqa: BLE001 - engine failures end playback, never the session.
                self._logger.exception("playback_failed", extra={"language": str(language), "voice": voice_name})
                return PlaybackOutcome(completed=False, voice=voice_name, error=f"{type(exc).__name__}: {exc}")

            self._logger.info("playback_finished", extra={"language": str(language), "voice": voice_name})
            return PlaybackOutcome(completed=True, voice=voice_name)
        finally:
            self._busy = False

    def _choose_voice(self) -> VoiceInfo | None:
        try:
            voices = self._synthesizer.voices()
        except Exception:  # noqa: BLE001 - fall back to the engine default voice.
            self._logger.warning("voice_listing_failed", exc_info=True)
            return None
        return select_voice(voices, self._preferred_voice)
