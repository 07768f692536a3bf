"""Runtime configuration for the voice translator."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="VOICE_TRANSLATOR_", env_file=".env", extra="ignore")

    app_name: str = "voice-translator"
    log_level: str = "INFO"
    source_language: str = "en-US"
    target_language: str = "es-ES"
    translate_url: str = Field(
        default="https://translate.googleapis.com/translate_a/single",
        description="Endpoint for the remote translation call.",
    )
    translate_timeout_seconds: float = 5.0
    offline: bool = Field(default=False, description="Skip the remote call and use fallback phrases only.")
    preferred_voice: str = "Google US English"
    playback_rate: float = 0.8
    playback_pitch: float = 1.0
    simulated_playback_seconds: float = 2.0
    phrase_time_limit: float = Field(default=10.0, description="Per-utterance capture limit in seconds.")
    listen_timeout: float | None = Field(default=15.0, description="Seconds to wait for speech before reporting no-speech.")
    ambient_noise_seconds: float = 0.2
    timer_interval_seconds: float = 1.0


settings = Settings()
