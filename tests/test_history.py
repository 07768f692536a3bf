from voice_translator.history import HISTORY_CAPACITY, HistoryBuffer
from voice_translator.languages import LanguageTag
from voice_translator.models import HistoryEntry


def _entry(index: int) -> HistoryEntry:
    return HistoryEntry(
        id=f"tx-{index}",
        original_text=f"phrase {index}",
        translated_text=f"frase {index}",
        source_language=LanguageTag("en-US"),
        target_language=LanguageTag("es-ES"),
    )


def test_six_appends_keep_the_five_newest_first() -> None:
    history = HistoryBuffer()
    for index in range(1, 7):
        history.append(_entry(index))

    assert len(history) == HISTORY_CAPACITY == 5
    assert [entry.id for entry in history] == ["tx-6", "tx-5", "tx-4", "tx-3", "tx-2"]


def test_clear_empties_buffer_and_snapshot_is_detached() -> None:
    history = HistoryBuffer()
    history.append(_entry(1))
    snapshot = history.snapshot()

    history.clear()

    assert len(history) == 0
    assert [entry.id for entry in snapshot] == ["tx-1"]
