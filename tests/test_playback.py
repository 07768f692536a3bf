from __future__ import annotations

import asyncio

import pytest

from voice_translator.errors import PlaybackBusy
from voice_translator.voice.interfaces import SpeechOptions, VoiceInfo
from voice_translator.voice.playback import PlaybackController, select_voice


class StubSynthesizer:
    def __init__(self, voices: list[VoiceInfo] | None = None, fail: bool = False, fail_voices: bool = False) -> None:
        self._voices = voices or []
        self.fail = fail
        self.fail_voices = fail_voices
        self.spoken: list[tuple[str, str, SpeechOptions]] = []

    def voices(self) -> list[VoiceInfo]:
        if self.fail_voices:
            raise RuntimeError("driver not ready")
        return self._voices

    def speak(self, text: str, *, language: str, options: SpeechOptions) -> None:
        if self.fail:
            raise RuntimeError("audio device lost")
        self.spoken.append((text, language, options))


VOICES = [
    VoiceInfo(id="v1", name="Daniel", gender="male"),
    VoiceInfo(id="v2", name="Microsoft Zira Female"),
    VoiceInfo(id="v3", name="Samantha", gender="Female"),
    VoiceInfo(id="v4", name="Google US English"),
]


def test_select_voice_prefers_exact_name_then_female() -> None:
    assert select_voice(VOICES, "Google US English").id == "v4"
    assert select_voice(VOICES, "Nonexistent").id == "v3"
    assert select_voice(VOICES[:2], None).id == "v2"
    assert select_voice(VOICES[:1], "Google US English") is None


def test_speak_uses_selected_voice_and_rate() -> None:
    synthesizer = StubSynthesizer(VOICES)
    playback = PlaybackController(synthesizer, rate=0.8, pitch=1.2)

    outcome = asyncio.run(playback.speak("  hola   amigo ", "es-ES"))

    assert outcome.completed is True
    assert outcome.voice == "Google US English"
    text, language, options = synthesizer.spoken[0]
    assert (text, language) == ("hola amigo", "es-ES")
    assert (options.rate, options.pitch) == (0.8, 1.2)
    assert playback.busy is False


def test_voice_listing_failure_falls_back_to_default_voice() -> None:
    synthesizer = StubSynthesizer(fail_voices=True)

    outcome = asyncio.run(PlaybackController(synthesizer).speak("hola", "es-ES"))

    assert outcome.completed is True
    assert outcome.voice is None
    assert synthesizer.spoken[0][2].voice is None


def test_engine_failure_resolves_to_failed_outcome() -> None:
    playback = PlaybackController(StubSynthesizer(fail=True))

    outcome = asyncio.run(playback.speak("hola", "es-ES"))

    assert outcome.completed is False
    assert "audio device lost" in outcome.error
    assert playback.busy is False


def test_missing_synthesizer_simulates_completion() -> None:
    outcome = asyncio.run(PlaybackController(None, simulated_seconds=0.01).speak("hola", "es-ES"))

    assert outcome.completed is True
    assert outcome.simulated is True


def test_overlapping_playback_is_rejected() -> None:
    async def _run() -> None:
        playback = PlaybackController(None, simulated_seconds=0.05)
        first = asyncio.create_task(playback.speak("uno", "es-ES"))
        await asyncio.sleep(0.01)
        with pytest.raises(PlaybackBusy):
            await playback.speak("dos", "es-ES")
        await first

    asyncio.run(_run())


def test_blank_text_is_not_spoken() -> None:
    synthesizer = StubSynthesizer()

    assert asyncio.run(PlaybackController(synthesizer).speak("   ", "es-ES")) is None
    assert synthesizer.spoken == []
