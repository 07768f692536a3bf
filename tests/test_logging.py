import logging

from voice_translator.telemetry import StructuredFormatter, configure_logging


def test_structured_formatter_appends_extra_fields() -> None:
    record = logging.LogRecord("voice_translator.controller", logging.INFO, __file__, 1, "session_transition", (), None)
    record.from_state = "listening"
    record.to_state = "idle"

    rendered = StructuredFormatter("%(message)s").format(record)

    assert rendered == "session_transition from_state=listening to_state=idle"


def test_configure_logging_installs_single_handler() -> None:
    configure_logging("debug")
    configure_logging("warning")

    logger = logging.getLogger("voice_translator")

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert logger.propagate is False
