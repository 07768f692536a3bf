"""Console logging with structured ``extra=`` fields rendered after the event name."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_RESERVED_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime", "taskName"}


class StructuredFormatter(logging.Formatter):
    """Formats ``logger.info("event", extra={...})`` as ``event key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_FIELDS and not key.startswith("_")
        }
        if not fields:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} {rendered}"


def configure_logging(level: str = "INFO") -> None:
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(StructuredFormatter("%(message)s", datefmt="[%X]"))
    root = logging.getLogger("voice_translator")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
