"""Logging setup for the voice translator."""

from .logging import StructuredFormatter, configure_logging

__all__ = ["StructuredFormatter", "configure_logging"]
