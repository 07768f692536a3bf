from __future__ import annotations

import asyncio
import logging
import types

from voice_translator.models import RecognitionResult
from voice_translator.voice.stt_speechrecognition import SpeechRecognitionHandle, best_alternative


def _fake_sr(
    response=None,
    *,
    speech: bool = True,
    listen_error: Exception | None = None,
    recognize_error: str | None = None,
):
    sr = types.SimpleNamespace(stops=[])
    sr.WaitTimeoutError = type("WaitTimeoutError", (Exception,), {})
    sr.RequestError = type("RequestError", (Exception,), {})
    sr.UnknownValueError = type("UnknownValueError", (Exception,), {})

    class Microphone:
        def __init__(self, sample_rate=None, chunk_size=None) -> None:
            pass

        def __enter__(self):
            return self

        def __exit__(self, *exc) -> None:
            return None

    class Recognizer:
        def adjust_for_ambient_noise(self, source, duration=None) -> None:
            pass

        def listen_in_background(self, source, callback, phrase_time_limit=None):
            if listen_error is not None:
                raise listen_error
            if speech:
                callback(self, "audio")

            def stopper(wait_for_stop=True) -> None:
                sr.stops.append(wait_for_stop)

            return stopper

        def recognize_google(self, audio, language=None, show_all=False):
            if recognize_error is not None:
                raise getattr(sr, recognize_error)("offline")
            return response

    sr.Microphone = Microphone
    sr.Recognizer = Recognizer
    return sr


def _capture(sr, *, abort: bool = False, stop_after: float | None = None, timeout: float | None = None) -> list[tuple]:
    async def _run() -> list[tuple]:
        events: list[tuple] = []
        ended = asyncio.Event()

        def on_end() -> None:
            events.append(("end",))
            ended.set()

        handle = SpeechRecognitionHandle(
            sr,
            language="en-US",
            on_result=lambda result: events.append(("result", result)),
            on_error=lambda code: events.append(("error", code)),
            on_end=on_end,
            phrase_time_limit=5.0,
            timeout=timeout,
            adjust_noise_seconds=0.0,
            sample_rate=16_000,
            chunk_size=1024,
            logger=logging.getLogger("test"),
        )
        handle.start()
        if abort:
            handle.abort()
        if stop_after is not None:
            await asyncio.sleep(stop_after)
            handle.stop()
        await asyncio.wait_for(ended.wait(), timeout=2)
        return events

    return asyncio.run(_run())


def test_best_alternative_reads_top_transcript_and_confidence() -> None:
    response = {"alternative": [{"transcript": "hello there", "confidence": 0.91}, {"transcript": "hello their"}]}

    assert best_alternative(response) == RecognitionResult(text="hello there", confidence=0.91)
    assert best_alternative([]) is None
    assert best_alternative({"alternative": [{"transcript": "  "}]}) is None


def test_handle_delivers_result_then_end_and_releases_microphone() -> None:
    sr = _fake_sr({"alternative": [{"transcript": "hello", "confidence": 0.8}], "final": True})

    events = _capture(sr)

    assert events == [("result", RecognitionResult(text="hello", confidence=0.8)), ("end",)]
    assert sr.stops == [False]


def test_handle_reports_no_speech_and_network_errors() -> None:
    assert _capture(_fake_sr(speech=False), timeout=0.05) == [("error", "no-speech"), ("end",)]
    assert _capture(_fake_sr(recognize_error="RequestError")) == [("error", "network"), ("end",)]


def test_unexpected_engine_failure_reports_unknown_and_still_ends() -> None:
    sr = _fake_sr(listen_error=AssertionError("Audio source must be entered before listening"))

    assert _capture(sr) == [("error", "unknown"), ("end",)]


def test_missing_audio_device_reports_audio_capture() -> None:
    assert _capture(_fake_sr(listen_error=OSError("no default input device"))) == [("error", "audio-capture"), ("end",)]


def test_nothing_recognized_ends_without_result() -> None:
    assert _capture(_fake_sr([])) == [("end",)]


def test_abort_suppresses_result() -> None:
    sr = _fake_sr({"alternative": [{"transcript": "hello", "confidence": 0.8}]})

    assert _capture(sr, abort=True) == [("end",)]


def test_abort_releases_microphone_without_waiting_for_speech() -> None:
    sr = _fake_sr(speech=False)

    assert _capture(sr, abort=True) == [("end",)]
    assert sr.stops == [False]


def test_stop_while_waiting_for_speech_ends_capture_promptly() -> None:
    sr = _fake_sr(speech=False)

    assert _capture(sr, stop_after=0.05) == [("end",)]
    assert sr.stops == [False]
