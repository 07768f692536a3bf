from voice_translator.config import Settings


def test_settings_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.source_language == "en-US"
    assert settings.target_language == "es-ES"
    assert settings.playback_rate == 0.8


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("VOICE_TRANSLATOR_TARGET_LANGUAGE", "fr-FR")
    monkeypatch.setenv("VOICE_TRANSLATOR_OFFLINE", "true")

    settings = Settings(_env_file=None)

    assert settings.target_language == "fr-FR"
    assert settings.offline is True
