"""Startup detection of speech recognition and synthesis support."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import Callable

CapabilityCheck = Callable[[], tuple[bool, str | None]]


@dataclass(frozen=True, slots=True)
class CapabilityReport:
    recognition: bool
    synthesis: bool
    details: list[str] = field(default_factory=list)


def check_recognition() -> tuple[bool, str | None]:
    try:
        sr = importlib.import_module("speech_recognition")
    except ImportError:
        return False, "speech_recognition is not installed. Install with: pip install 'voice-translator[voice]'"
    try:
        microphones = sr.Microphone.list_microphone_names()
    except Exception as exc:  # noqa: BLE001 - PyAudio missing or no audio subsystem.
        return False, f"No usable microphone backend: {type(exc).__name__}: {exc}"
    if not microphones:
        return False, "No microphone devices were found"
    return True, None


def check_synthesis() -> tuple[bool, str | None]:
    try:
        pyttsx3 = importlib.import_module("pyttsx3")
    except ImportError:
        return False, "pyttsx3 is not installed. Install with: pip install 'voice-translator[voice]'"
    try:
        pyttsx3.init()
    except Exception as exc:  # noqa: BLE001 - driver initialisation failures vary by platform.
        return False, f"Speech synthesis driver unavailable: {type(exc).__name__}: {exc}"
    return True, None


class CapabilityProbe:
    """Runs the capability checks once and caches the report."""

    def __init__(
        self,
        *,
        recognition_check: CapabilityCheck = check_recognition,
        synthesis_check: CapabilityCheck = check_synthesis,
        logger: logging.Logger | None = None,
    ) -> None:
        self._recognition_check = recognition_check
        self._synthesis_check = synthesis_check
        self._logger = logger or logging.getLogger("voice_translator.capability")
        self._cached: CapabilityReport | None = None

    @property
    def cached(self) -> CapabilityReport | None:
        return self._cached

    def run(self) -> CapabilityReport:
        if self._cached is not None:
            return self._cached

        recognition, recognition_detail = self._recognition_check()
        synthesis, synthesis_detail = self._synthesis_check()
        details = [detail for detail in (recognition_detail, synthesis_detail) if detail]
        self._cached = CapabilityReport(recognition=recognition, synthesis=synthesis, details=details)

        if not recognition:
            self._logger.warning("recognition_unsupported", extra={"detail": recognition_detail})
        if not synthesis:
            self._logger.warning("synthesis_unsupported", extra={"detail": synthesis_detail})
        self._logger.info("capabilities_probed", extra={"recognition": recognition, "synthesis": synthesis})
        return self._cached

    def reset(self) -> None:
        self._cached = None
