from __future__ import annotations

import pytest

from wwsvc_mock.logging_utils import RichConsoleRenderer
from wwsvc_mock.output_config import ENV_VAR_NAME, get_log_format


def test_cli_override_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_VAR_NAME, "json")

    assert get_log_format("plain") == "plain"


@pytest.mark.parametrize(
    ("env_value", "expected"),
    [("json", "json"), ("plain", "plain"), ("rich", "console"), ("auto", "console"), ("bogus", "console")],
)
def test_environment_mapping(monkeypatch: pytest.MonkeyPatch, env_value: str, expected: str) -> None:
    monkeypatch.setenv(ENV_VAR_NAME, env_value)

    assert get_log_format() == expected


def test_rich_renderer_includes_event_and_fields() -> None:
    rendered = RichConsoleRenderer()(
        None,
        "info",
        {"timestamp": "2026-01-01T00:00:00Z", "level": "info", "event": "server_started", "port": 3000},
    )

    assert "server_started" in rendered
    assert "port=" in rendered
    assert "3000" in rendered
