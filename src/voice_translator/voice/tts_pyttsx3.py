"""Text-to-speech backend powered by ``pyttsx3``."""

from __future__ import annotations

from voice_translator.errors import CapabilityUnsupported
from voice_translator.voice.interfaces import SpeechOptions, SpeechSynthesizer, VoiceInfo

DEFAULT_WORDS_PER_MINUTE = 200


def _language_code(raw: object) -> str:
    # espeak reports languages as bytes prefixed with a priority byte, e.g. b"\x05en-us".
    if isinstance(raw, bytes):
        return raw[1:].decode("utf-8", errors="ignore") if raw[:1] < b" " else raw.decode("utf-8", errors="ignore")
    return str(raw)


class Pyttsx3SpeechSynthesizer(SpeechSynthesizer):
    """Local speech synthesis using a pyttsx3 engine instance."""

    def __init__(self, *, volume: float | None = None) -> None:
        try:
            import pyttsx3
        except ImportError as exc:  # pragma: no cover - import guard
            raise CapabilityUnsupported(
                "Voice TTS backend unavailable. Install extras with: pip install 'voice-translator[voice]'"
            ) from exc

        self._engine = pyttsx3.init()
        self._base_rate = int(self._engine.getProperty("rate") or DEFAULT_WORDS_PER_MINUTE)
        if volume is not None:
            self._engine.setProperty("volume", max(0.0, min(1.0, volume)))

    def voices(self) -> list[VoiceInfo]:
        return [
            VoiceInfo(
                id=voice.id,
                name=voice.name or voice.id,
                gender=getattr(voice, "gender", None),
                languages=tuple(_language_code(lang) for lang in (getattr(voice, "languages", None) or [])),
            )
            for voice in self._engine.getProperty("voices") or []
        ]

    def speak(self, text: str, *, language: str, options: SpeechOptions) -> None:
        if options.voice is not None:
            self._engine.setProperty("voice", options.voice.id)
        self._engine.setProperty("rate", max(1, int(self._base_rate * options.rate)))
        # pyttsx3 drivers expose no pitch control; options.pitch is not applied.
        self._engine.say(text)
        self._engine.runAndWait()
