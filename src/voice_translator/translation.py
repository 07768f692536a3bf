"""Translation with a remote primary call, a static fallback table and a final sentinel."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol

import requests

from voice_translator.errors import TranslationUnavailable
from voice_translator.languages import LanguageTag
from voice_translator.models import TranslationOutcome

NOT_AVAILABLE = "Translation not available"

FALLBACK_PHRASES: dict[tuple[str, str], str] = {
    ("en", "es"): "Hola, ¿cómo estás?",
    ("en", "fr"): "Bonjour, comment allez-vous?",
    ("en", "de"): "Hallo, wie geht es dir?",
    ("en", "hi"): "नमस्ते, आप कैसे हैं?",
    ("es", "en"): "Hello, how are you?",
    ("es", "fr"): "Bonjour, comment allez-vous?",
    ("es", "hi"): "नमस्ते, आप कैसे हैं?",
}


class RemoteTranslator(Protocol):
    """Primary translation call; raises ``TranslationUnavailable`` on any failure."""

    def translate(self, text: str, source: str, target: str) -> str:
        """Translate ``text`` between base language codes."""


def parse_gtx_response(payload: Any) -> str:
    """Join the translated sentence segments of a ``client=gtx`` response."""
    try:
        segments = payload[0]
        translated = "".join(segment[0] for segment in segments if segment and segment[0])
    except (IndexError, KeyError, TypeError) as exc:
        raise TranslationUnavailable("Unexpected translation response shape") from exc
    if not translated.strip():
        raise TranslationUnavailable("Translation response was empty")
    return translated


class GoogleTranslateClient(RemoteTranslator):
    """Calls the public Google Translate ``translate_a/single`` endpoint."""

    def __init__(
        self,
        *,
        url: str = "https://translate.googleapis.com/translate_a/single",
        timeout_seconds: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def translate(self, text: str, source: str, target: str) -> str:
        params = {"client": "gtx", "sl": source, "tl": target, "dt": "t", "q": text}
        try:
            response = self._session.get(self._url, params=params, timeout=self._timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise TranslationUnavailable(f"Translation request failed: {exc}") from exc
        except ValueError as exc:
            raise TranslationUnavailable("Translation response was not valid JSON") from exc
        return parse_gtx_response(payload)


class TranslationResolver:
    """Always resolves to a ``TranslationOutcome``.

    The remote translator is tried first; if it fails (or none is configured)
    the fallback table is consulted by base language pair, and pairs that are
    not in the table resolve to :data:`NOT_AVAILABLE`.
    """

    def __init__(
        self,
        remote: RemoteTranslator | None,
        *,
        fallback: Mapping[tuple[str, str], str] = FALLBACK_PHRASES,
        logger: logging.Logger | None = None,
    ) -> None:
        self._remote = remote
        self._fallback = fallback
        self._logger = logger or logging.getLogger("voice_translator.translation")

    async def resolve(
        self,
        text: str,
        source: LanguageTag | str,
        target: LanguageTag | str,
    ) -> TranslationOutcome:
        source_tag = LanguageTag.parse(source)
        target_tag = LanguageTag.parse(target)

        if self._remote is not None:
            try:
                translated = await asyncio.to_thread(
                    self._remote.translate, text, source_tag.base, target_tag.base
                )
                self._logger.info(
                    "translation_succeeded",
                    extra={"source": source_tag.base, "target": target_tag.base},
                )
                return TranslationOutcome(text=translated, was_fallback=False)
            except TranslationUnavailable as exc:
                self._logger.warning(
                    "translation_unavailable",
                    extra={"source": source_tag.base, "target": target_tag.base, "error": str(exc)},
                )
            except Exception:  # noqa: BLE001 - the resolver must always produce an outcome.
                self._logger.exception(
                    "translation_failed",
                    extra={"source": source_tag.base, "target": target_tag.base},
                )

        return self.fallback(source_tag, target_tag)

    def fallback(self, source: LanguageTag, target: LanguageTag) -> TranslationOutcome:
        phrase = self._fallback.get((source.base, target.base))
        if phrase is None:
            self._logger.info("translation_fallback_missing", extra={"source": source.base, "target": target.base})
            return TranslationOutcome(text=NOT_AVAILABLE, was_fallback=True)
        return TranslationOutcome(text=phrase, was_fallback=True)
