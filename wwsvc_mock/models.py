"""Pydantic models describing the mock server configuration."""

from __future__ import annotations

import json
import re
import secrets
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .errors import ConfigurationError, UnknownMethodError

UINT32_MAX = 2**32 - 1


def generate_hash() -> str:
    """Return 32 random lowercase hex characters."""

    return secrets.token_hex(16)


class ResourceMethod(str, Enum):
    """Methods the WEBSERVICES accept for functions."""

    GET = "GET"
    INSERT = "INSERT"
    PUT = "PUT"
    DELETE = "DELETE"
    EXEC = "EXEC"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> "ResourceMethod":
        try:
            return cls(token)
        except ValueError as exc:
            raise UnknownMethodError(token) from exc


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class FileSource(_FrozenModel):
    """Mock data read from a file on every matching request."""

    type: Literal["File"] = "File"
    file: str

    def as_string(self) -> str:
        try:
            return Path(self.file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Mock data file {self.file} cannot be read: {exc}") from exc

    def as_json(self) -> dict[str, Any] | None:
        return _parse_object(self.as_string(), origin=self.file)


class StringSource(_FrozenModel):
    """Mock data given inline in the configuration."""

    type: Literal["String"] = "String"
    value: str

    def as_string(self) -> str:
        return self.value

    def as_json(self) -> dict[str, Any] | None:
        return _parse_object(self.value, origin="inline string")


class EmptySource(_FrozenModel):
    """No mock data; only the COMRESULT is returned."""

    type: Literal["Empty"] = "Empty"

    def as_string(self) -> str:
        return ""

    def as_json(self) -> dict[str, Any] | None:
        return None


DataSource = Annotated[Union[FileSource, StringSource, EmptySource], Field(discriminator="type")]


def _parse_object(text: str, *, origin: str) -> dict[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Mock data from {origin} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Mock data from {origin} must be a JSON object")
    return payload


class LiteralMatch(_FrozenModel):
    """Parameter value compared by exact string equality."""

    value: str

    def matches(self, candidate: str) -> bool:
        return candidate == self.value

    def describe(self) -> str:
        return self.value


class PatternMatch(_FrozenModel):
    """Parameter value matched by a regular expression search (not anchored)."""

    pattern: re.Pattern[str]

    def matches(self, candidate: str) -> bool:
        return self.pattern.search(candidate) is not None

    def describe(self) -> str:
        return self.pattern.pattern


def _coerce_match_value(value: Any) -> Any:
    # bare strings stay regular expressions so existing configs keep working
    if isinstance(value, (str, re.Pattern)):
        return PatternMatch(pattern=value)
    if isinstance(value, dict):
        if set(value) == {"literal"}:
            return LiteralMatch(value=value["literal"])
        if set(value) == {"pattern"}:
            return PatternMatch(pattern=value["pattern"])
    return value


MatchValue = Annotated[Union[LiteralMatch, PatternMatch], BeforeValidator(_coerce_match_value)]


class MockResource(_FrozenModel):
    """A canned answer for one function/method/parameter combination.

    Resources are matched in configuration order and the first match wins.
    A resource without ``parameters`` only matches calls that carry none.
    """

    data_source: DataSource
    function: str
    method: ResourceMethod
    revision: int = Field(ge=0, le=UINT32_MAX)
    parameters: dict[str, MatchValue] | None = None

    def describe(self) -> str:
        if self.parameters is None:
            rendered = "None"
        else:
            rendered = json.dumps(
                {name: value.describe() for name, value in self.parameters.items()},
                separators=(",", ":"),
                ensure_ascii=False,
            )
        return (
            f"MockResource {{ function: {self.function}, method: {self.method.value}, "
            f"revision: {self.revision}, parameters: {rendered} }}"
        )


class WebservicesConfig(_FrozenModel):
    """Identity of the mocked backend checked on registration."""

    vendor_hash: str = Field(default_factory=generate_hash)
    application_hash: str = Field(default_factory=generate_hash)
    version: int = Field(default=1, ge=0, le=UINT32_MAX)
    application_secret: str = "1"


class CredentialsConfig(_FrozenModel):
    """Session credentials handed to every successful registrant."""

    service_pass: str = Field(default_factory=generate_hash)
    application_id: str = Field(default_factory=generate_hash)


class WebwareConfig(_FrozenModel):
    webservices: WebservicesConfig = Field(default_factory=WebservicesConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)


class ServerConfig(_FrozenModel):
    """Bind address of the HTTP server, e.g. ``127.0.0.1:3000``."""

    bind_address: str

    def host_port(self) -> tuple[str, int]:
        host, sep, raw_port = self.bind_address.rpartition(":")
        if not sep or not raw_port.isdigit():
            raise ConfigurationError(f"bind_address {self.bind_address!r} must use host:port format")
        return host.strip("[]") or "0.0.0.0", int(raw_port)


class AppConfig(_FrozenModel):
    """Top-level configuration consumed by the mock server."""

    server: ServerConfig | None = None
    webware: WebwareConfig = Field(default_factory=WebwareConfig)
    mock_resources: tuple[MockResource, ...] = ()
    debug: bool = False

    def with_mock_resource(self, resource: MockResource) -> "AppConfig":
        """Return a copy with ``resource`` appended to the resource list."""

        return self.model_copy(update={"mock_resources": (*self.mock_resources, resource)})
