"""Configuration loading and the immutable per-process service context."""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .catalog import ResourceCatalog
from .errors import ConfigurationError
from .models import AppConfig, CredentialsConfig, WebservicesConfig

DEFAULT_CONFIG_PATH = Path("config.yaml")
ENV_PREFIX = "APP__"
ENV_SEPARATOR = "__"


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from ``path`` and ``APP__`` environment overrides.

    A missing file contributes nothing, so a server can be configured from the
    environment alone. ``APP__SERVER__BIND_ADDRESS`` sets ``server.bind_address``.
    """

    config_path = path or DEFAULT_CONFIG_PATH
    payload = _read_document(config_path) if config_path.exists() else {}
    overrides = _env_overrides(os.environ if environ is None else environ)
    merged = _deep_merge(payload, overrides)
    try:
        return AppConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Configuration {config_path} is invalid:\n{exc}") from exc


def _read_document(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            payload = json.loads(text)
        elif suffix == ".toml":
            payload = tomllib.loads(text)
        else:
            payload = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Configuration file {path} cannot be parsed: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return payload


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = [part.lower() for part in key[len(ENV_PREFIX):].split(ENV_SEPARATOR) if part]
        if not parts:
            continue
        cursor = overrides
        for part in parts[:-1]:
            nested = cursor.get(part)
            if not isinstance(nested, dict):
                nested = {}
                cursor[part] = nested
            cursor = nested
        cursor[parts[-1]] = value
    return overrides


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class ServiceContext:
    """Read-only snapshot shared by every request handler."""

    catalog: ResourceCatalog
    identity: WebservicesConfig
    credentials: CredentialsConfig
    debug: bool = False

    @classmethod
    def from_config(cls, config: AppConfig) -> "ServiceContext":
        return cls(
            catalog=ResourceCatalog(config.mock_resources),
            identity=config.webware.webservices,
            credentials=config.webware.credentials,
            debug=config.debug,
        )
