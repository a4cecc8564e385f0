"""Tests for the click CLI."""

import json
import os
from unittest.mock import patch

from click.testing import CliRunner

from session_renamer.cli import main


def test_config_prints_effective_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "none"))
    monkeypatch.delenv("SESSION_RENAMER_CONFIG", raising=False)
    (tmp_path / ".opencode").mkdir()
    (tmp_path / ".opencode" / "session-renamer.jsonc").write_text(
        '{"model": "", // host default\n}', encoding="utf-8"
    )

    result = CliRunner().invoke(main, ["config", "--directory", str(tmp_path)])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["model"] == ""
    assert data["title_max_length"] == 20


def test_serve_passes_settings(tmp_path, monkeypatch):
    # serve writes these; restored on teardown
    monkeypatch.setenv("SESSION_RENAMER_SERVER_URL", "")
    monkeypatch.setenv("SESSION_RENAMER_DIRECTORY", "")
    with patch("session_renamer.cli.uvicorn.run") as run:
        result = CliRunner().invoke(main, [
            "serve", "--port", "9000",
            "--server-url", "http://127.0.0.1:4096",
            "--directory", str(tmp_path),
        ])

    assert result.exit_code == 0
    run.assert_called_once_with("session_renamer.server:app", host="127.0.0.1", port=9000, reload=False)
    assert os.environ["SESSION_RENAMER_SERVER_URL"] == "http://127.0.0.1:4096"
    assert os.environ["SESSION_RENAMER_DIRECTORY"] == str(tmp_path)
