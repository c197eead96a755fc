"""Mock server for the WEBWARE WEBSERVICES protocol."""

from .catalog import ResourceCatalog
from .config import ServiceContext, load_config
from .envelope import ComResult, ServiceResponse
from .errors import ConfigurationError, UnknownMethodError, WwsvcMockError
from .messages import WebserviceRequest
from .models import (
    AppConfig,
    CredentialsConfig,
    EmptySource,
    FileSource,
    LiteralMatch,
    MockResource,
    PatternMatch,
    ResourceMethod,
    ServerConfig,
    StringSource,
    WebservicesConfig,
)
from .server import WebserviceServer

__all__ = [
    "AppConfig",
    "ComResult",
    "ConfigurationError",
    "CredentialsConfig",
    "EmptySource",
    "FileSource",
    "LiteralMatch",
    "MockResource",
    "PatternMatch",
    "ResourceCatalog",
    "ResourceMethod",
    "ServerConfig",
    "ServiceContext",
    "ServiceResponse",
    "StringSource",
    "UnknownMethodError",
    "WebserviceRequest",
    "WebserviceServer",
    "WebservicesConfig",
    "WwsvcMockError",
    "load_config",
]

__version__ = "1.0.4"
