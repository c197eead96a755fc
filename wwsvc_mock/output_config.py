"""Log output format selection for the mock server."""

from __future__ import annotations

import os
from typing import Literal

LogFormat = Literal["json", "console", "plain"]

ENV_VAR_NAME = "CONSOLE_OUTPUT_FORMAT"

_ENV_FORMATS: dict[str, LogFormat] = {
    "json": "json",
    "plain": "plain",
    "console": "console",
    "auto": "console",
    "rich": "console",
}


def get_log_format(cli_override: str | None = None) -> LogFormat:
    """
    Resolve the log format: CLI parameter > environment variable > console.

    ``auto`` and ``rich`` in the environment variable both mean the colored
    console renderer; unknown values fall through to the next source.
    """
    if cli_override and cli_override.lower() in ("json", "console", "plain"):
        return _ENV_FORMATS[cli_override.lower()]

    env_value = os.environ.get(ENV_VAR_NAME, "").lower()
    if env_value in _ENV_FORMATS:
        return _ENV_FORMATS[env_value]

    return "console"
