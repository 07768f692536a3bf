from __future__ import annotations

import pytest

from voice_translator.voice.capability import CapabilityReport


def test_voice_reports_actionable_error_when_recognition_missing(monkeypatch) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from voice_translator import main

    class _NoRecognitionProbe:
        def run(self) -> CapabilityReport:
            return CapabilityReport(
                recognition=False,
                synthesis=False,
                details=["speech_recognition is not installed. Install with: pip install 'voice-translator[voice]'"],
            )

    monkeypatch.setattr(main, "CapabilityProbe", _NoRecognitionProbe)

    result = typer_testing.CliRunner().invoke(main.app, ["voice", "--offline"], catch_exceptions=False)

    assert result.exit_code == 1
    assert "voice-translator[voice]" in result.stdout
