"""Language tags and the catalog of languages offered to the user."""

from __future__ import annotations

from dataclasses import dataclass

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en-US": "English",
    "es-ES": "Spanish",
    "fr-FR": "French",
    "de-DE": "German",
    "it-IT": "Italian",
    "pt-PT": "Portuguese",
    "ru-RU": "Russian",
    "ja-JP": "Japanese",
    "ko-KR": "Korean",
    "zh-CN": "Chinese",
    "ar-SA": "Arabic",
    "hi-IN": "Hindi",
}

DEFAULT_SOURCE = "en-US"
DEFAULT_TARGET = "es-ES"


@dataclass(frozen=True, slots=True)
class LanguageTag:
    """Region-qualified language code such as ``en-US``."""

    code: str

    def __post_init__(self) -> None:
        if not self.code or not self.code.strip():
            raise ValueError("Language tag must be non-empty")

    @classmethod
    def parse(cls, value: str | LanguageTag) -> LanguageTag:
        if isinstance(value, LanguageTag):
            return value
        return cls(code=(value or "").strip())

    @property
    def base(self) -> str:
        """Language-only code used by the translation call (``en-US`` -> ``en``)."""
        return self.code.replace("_", "-").split("-")[0].lower()

    def __str__(self) -> str:
        return self.code


def language_name(tag: LanguageTag | str) -> str:
    code = str(tag)
    return SUPPORTED_LANGUAGES.get(code, code)
