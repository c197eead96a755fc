"""Exception hierarchy for wwsvc-mock."""

from __future__ import annotations


class WwsvcMockError(Exception):
    """Base class for all errors raised by the mock server."""


class ConfigurationError(WwsvcMockError):
    """Raised when operator supplied configuration or mock data is unusable."""


class UnknownMethodError(WwsvcMockError, ValueError):
    """Raised when a function method token is not one of the known methods."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown method: {token}")
        self.token = token
