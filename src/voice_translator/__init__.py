"""Voice capture, translation and playback orchestration."""

from .controller import SessionController
from .history import HistoryBuffer
from .languages import LanguageTag
from .models import SessionSnapshot, SessionState
from .translation import TranslationResolver

__all__ = [
    "HistoryBuffer",
    "LanguageTag",
    "SessionController",
    "SessionSnapshot",
    "SessionState",
    "TranslationResolver",
]
