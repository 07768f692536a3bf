"""Scripted recognition engine shared by the adapter and controller tests."""

from __future__ import annotations

from voice_translator.models import RecognitionResult


class FakeHandle:
    def __init__(self, owner: "FakeRecognition", language: str, on_result, on_error, on_end) -> None:
        self.owner = owner
        self.language = language
        self.on_result = on_result
        self.on_error = on_error
        self.on_end = on_end
        self.started = False
        self.stopped = False
        self.aborted = False

    def start(self) -> None:
        if self.owner.fail_starts > 0:
            self.owner.fail_starts -= 1
            raise RuntimeError("microphone busy")
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def abort(self) -> None:
        self.aborted = True

    def emit_result(self, text: str, confidence: float = 0.9) -> None:
        self.on_result(RecognitionResult(text=text, confidence=confidence))
        self.on_end()

    def emit_error(self, code: str) -> None:
        self.on_error(code)
        self.on_end()

    def emit_end(self) -> None:
        self.on_end()


class FakeRecognition:
    def __init__(self, fail_starts: int = 0) -> None:
        self.fail_starts = fail_starts
        self.handles: list[FakeHandle] = []

    def configure(self, language: str, *, on_result, on_error, on_end) -> FakeHandle:
        handle = FakeHandle(self, language, on_result, on_error, on_end)
        self.handles.append(handle)
        return handle
