import pytest

from fakes import FakeRecognition
from voice_translator.errors import AlreadyActive
from voice_translator.models import RecognitionResult
from voice_translator.voice.recognition import RecognitionEventKind, RecognitionSessionAdapter


def _adapter():
    events = []
    capability = FakeRecognition()
    adapter = RecognitionSessionAdapter(capability, events.append)
    return adapter, capability, events


def test_configure_and_each_new_activation_bump_generation() -> None:
    adapter, capability, _ = _adapter()

    assert adapter.configure("en-US") == 1
    assert adapter.start() == 1
    capability.handles[-1].emit_end()
    assert adapter.start() == 2

    assert [handle.language for handle in capability.handles] == ["en-US", "en-US"]


def test_start_while_running_raises_already_active() -> None:
    adapter, _, _ = _adapter()
    adapter.configure("en-US")
    adapter.start()

    with pytest.raises(AlreadyActive):
        adapter.start()


def test_start_requires_configuration() -> None:
    adapter, _, _ = _adapter()

    with pytest.raises(RuntimeError):
        adapter.start()


def test_stop_and_abort_are_idempotent() -> None:
    adapter, capability, _ = _adapter()
    adapter.configure("en-US")
    adapter.stop()
    adapter.abort()
    assert capability.handles[0].stopped is False
    assert capability.handles[0].aborted is False

    adapter.start()
    adapter.stop()
    adapter.stop()

    assert capability.handles[0].stopped is True
    assert adapter.active is False


def test_only_one_terminal_event_per_activation() -> None:
    adapter, capability, events = _adapter()
    adapter.configure("en-US")
    adapter.start()
    handle = capability.handles[-1]

    handle.on_result(RecognitionResult(text="hi", confidence=1.0))
    handle.on_error("network")
    handle.on_end()

    assert [event.kind for event in events] == [RecognitionEventKind.RESULT, RecognitionEventKind.END]
    assert all(event.generation == 1 for event in events)


def test_reconfigure_aborts_running_capture_and_tags_old_events_as_stale() -> None:
    adapter, capability, events = _adapter()
    adapter.configure("en-US")
    adapter.start()
    old = capability.handles[-1]

    adapter.configure("fr-FR")
    adapter.start()
    old.emit_end()

    assert old.aborted is True
    assert capability.handles[-1].language == "fr-FR"
    assert events[-1].generation == 1
    assert adapter.generation == 2
    assert adapter.active is True
