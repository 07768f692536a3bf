"""Error taxonomy for the voice translation core."""

from __future__ import annotations


class VoiceTranslatorError(RuntimeError):
    """Base class for recoverable voice translator failures."""


class CapabilityUnsupported(VoiceTranslatorError):
    """Raised when speech recognition or synthesis is missing from the environment."""


class RecognitionError(VoiceTranslatorError):
    """Engine-reported failure while capturing an utterance."""

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or f"Speech recognition failed: {code}")


class TranslationUnavailable(VoiceTranslatorError):
    """Primary translation call failed; callers degrade to fallback text."""


class PlaybackBusy(VoiceTranslatorError):
    """A playback request arrived while another one is still outstanding."""


class AlreadyActive(VoiceTranslatorError):
    """A recognition start was requested while capture is already running."""
