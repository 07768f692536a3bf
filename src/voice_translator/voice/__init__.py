"""Speech recognition and playback boundaries."""

from .capability import CapabilityProbe, CapabilityReport
from .interfaces import RecognitionCapability, RecognizerHandle, SpeechOptions, SpeechSynthesizer, VoiceInfo
from .playback import PlaybackController, select_voice
from .recognition import RecognitionEvent, RecognitionEventKind, RecognitionSessionAdapter

__all__ = [
    "CapabilityProbe",
    "CapabilityReport",
    "PlaybackController",
    "RecognitionCapability",
    "RecognitionEvent",
    "RecognitionEventKind",
    "RecognitionSessionAdapter",
    "RecognizerHandle",
    "SpeechOptions",
    "SpeechSynthesizer",
    "VoiceInfo",
    "select_voice",
]
