"""CLI startup entrypoint for the voice translator."""

from __future__ import annotations

import asyncio

import typer
from rich import print

from voice_translator.config import settings
from voice_translator.controller import SessionController
from voice_translator.errors import CapabilityUnsupported, PlaybackBusy
from voice_translator.languages import SUPPORTED_LANGUAGES, LanguageTag, language_name
from voice_translator.models import SessionSnapshot, SessionState, format_elapsed
from voice_translator.telemetry import configure_logging
from voice_translator.translation import GoogleTranslateClient, TranslationResolver
from voice_translator.voice.capability import CapabilityProbe, CapabilityReport
from voice_translator.voice.playback import PlaybackController

app = typer.Typer(help="Voice translator service entrypoint")


def _build_resolver(offline: bool = False) -> TranslationResolver:
    if offline or settings.offline:
        return TranslationResolver(remote=None)
    client = GoogleTranslateClient(url=settings.translate_url, timeout_seconds=settings.translate_timeout_seconds)
    return TranslationResolver(remote=client)


def _build_playback(report: CapabilityReport) -> PlaybackController:
    synthesizer = None
    if report.synthesis:
        try:
            from voice_translator.voice.tts_pyttsx3 import Pyttsx3SpeechSynthesizer

            synthesizer = Pyttsx3SpeechSynthesizer()
        except CapabilityUnsupported as exc:
            print({"warning": str(exc)})
    return PlaybackController(
        synthesizer,
        rate=settings.playback_rate,
        pitch=settings.playback_pitch,
        preferred_voice=settings.preferred_voice,
        simulated_seconds=settings.simulated_playback_seconds,
    )


def _build_recognition(report: CapabilityReport):
    if not report.recognition:
        return None
    try:
        from voice_translator.voice.stt_speechrecognition import SpeechRecognitionCapability

        return SpeechRecognitionCapability(
            phrase_time_limit=settings.phrase_time_limit,
            timeout=settings.listen_timeout,
            adjust_noise_seconds=settings.ambient_noise_seconds,
        )
    except CapabilityUnsupported as exc:
        print({"error": str(exc)})
        return None


def _describe(snapshot: SessionSnapshot) -> dict:
    described: dict = {
        "state": snapshot.state.value,
        "from": f"{language_name(snapshot.source_language)} ({snapshot.source_language})",
        "to": f"{language_name(snapshot.target_language)} ({snapshot.target_language})",
    }
    if snapshot.state == SessionState.LISTENING:
        described["recording"] = format_elapsed(snapshot.elapsed_seconds)
    if snapshot.original_text:
        described["original"] = snapshot.original_text
    if snapshot.confidence is not None:
        described["confidence"] = f"{snapshot.confidence}%"
    if snapshot.translated_text:
        described["translation"] = snapshot.translated_text
    if snapshot.was_fallback:
        described["fallback"] = True
    if snapshot.error is not None:
        described["error"] = snapshot.error.message
    return described


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "source_language": settings.source_language,
            "target_language": settings.target_language,
            "translate_url": settings.translate_url,
            "offline": settings.offline,
            "preferred_voice": settings.preferred_voice,
        }
    )


@app.command("languages")
def languages() -> None:
    """List the languages offered for recognition and translation."""
    print({code: name for code, name in SUPPORTED_LANGUAGES.items()})


@app.command("probe")
def probe() -> None:
    """Report whether speech recognition and synthesis are available."""
    report = CapabilityProbe().run()
    print({"recognition": report.recognition, "synthesis": report.synthesis, "details": report.details})


@app.command("translate")
def translate(
    text: str,
    source: str = typer.Option(settings.source_language, help="Source language tag, e.g. en-US"),
    target: str = typer.Option(settings.target_language, help="Target language tag, e.g. es-ES"),
    offline: bool = typer.Option(False, help="Skip the remote call and use fallback phrases"),
) -> None:
    """Translate typed text through the same resolver the voice session uses."""
    try:
        source_tag, target_tag = LanguageTag.parse(source), LanguageTag.parse(target)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    outcome = asyncio.run(_build_resolver(offline=offline).resolve(text, source_tag, target_tag))
    print({"original": text, "translation": outcome.text, "fallback": outcome.was_fallback})


@app.command("voice")
def voice(
    source: str = typer.Option(settings.source_language, help="Language you will speak"),
    target: str = typer.Option(settings.target_language, help="Language to translate into"),
    offline: bool = typer.Option(False, help="Skip the remote call and use fallback phrases"),
) -> None:
    """Run an interactive speak -> translate -> play loop."""
    configure_logging(settings.log_level)
    capability_probe = CapabilityProbe()
    report = capability_probe.run()
    recognition = _build_recognition(report)
    if recognition is None:
        print({"error": "Speech recognition is not supported here.", "details": report.details})
        raise typer.Exit(code=1)

    controller = SessionController(
        recognition=recognition,
        resolver=_build_resolver(offline=offline),
        playback=_build_playback(report),
        probe=capability_probe,
        source_language=source,
        target_language=target,
        timer_interval_seconds=settings.timer_interval_seconds,
    )
    asyncio.run(_voice_loop(controller))


async def _voice_loop(controller: SessionController) -> None:
    last: dict = {}

    def _show(snapshot: SessionSnapshot) -> None:
        nonlocal last
        described = _describe(snapshot)
        if described != last:
            print(described)
            last = described

    controller.subscribe(_show)
    controller.initialize()
    print(
        {
            "voice": "started",
            "hint": "Enter: start/stop recording, p: play, s: swap, src/tgt <tag>: change language, r: reset, h: history, q: quit",
        }
    )

    try:
        while True:
            command = (await asyncio.to_thread(input, "> ")).strip()
            if command == "q":
                break
            if command == "":
                controller.toggle_recording()
            elif command == "p":
                try:
                    outcome = await controller.play()
                except PlaybackBusy as exc:
                    print({"error": str(exc)})
                    continue
                if outcome is not None and not outcome.completed:
                    print({"playback_error": outcome.error})
            elif command == "s":
                controller.swap_languages()
            elif command == "r":
                controller.reset()
            elif command == "h":
                print(
                    [
                        {
                            "id": entry.id,
                            "from": str(entry.source_language),
                            "to": str(entry.target_language),
                            "original": entry.original_text,
                            "translation": entry.translated_text,
                            "at": entry.timestamp.astimezone().strftime("%H:%M"),
                        }
                        for entry in controller.history
                    ]
                )
            elif command.startswith(("src ", "tgt ")):
                kind, _, tag = command.partition(" ")
                try:
                    if kind == "src":
                        controller.set_source_language(tag)
                    else:
                        controller.set_target_language(tag)
                except ValueError as exc:
                    print({"error": str(exc)})
            else:
                print({"error": f"Unknown command: {command}"})
            await controller.wait_idle()
    finally:
        controller.close()
        print({"voice": "stopped"})


if __name__ == "__main__":
    app()
