from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from wwsvc_mock.main import app

runner = CliRunner()


def test_hash_command_prints_deregistration_hash() -> None:
    result = runner.invoke(app, ["hash", "abc", "Mon, 01 Jan 2000 00:00:00 GMT"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "593db04c709e2b545301da1a962c5710"


def test_serve_without_server_section_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APP__SERVER__BIND_ADDRESS", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({"debug": False}), encoding="utf-8")

    result = runner.invoke(app, ["serve", "--config", str(config_path)])

    assert result.exit_code == 1


def test_serve_rejects_invalid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({"server": {"bind_address": "nowhere"}}), encoding="utf-8")

    result = runner.invoke(app, ["serve", "--config", str(config_path)])

    assert result.exit_code == 2
