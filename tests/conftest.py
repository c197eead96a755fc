"""Test bootstrap and shared fixtures for wwsvc-mock."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from wwsvc_mock.config import ServiceContext  # noqa: E402
from wwsvc_mock.models import AppConfig  # noqa: E402
from wwsvc_mock.server import WebserviceServer  # noqa: E402

VENDOR_HASH = "vendorhash"
APP_HASH = "apphash"
SECRET = "1"
VERSION = 3
SERVICE_PASS = "servicepass"
APPLICATION_ID = "abc"


@pytest.fixture
def artikel_file(tmp_path: Path) -> Path:
    target = tmp_path / "artikel.json"
    target.write_text(json.dumps({"ARTNR": "Artikel19Prozent", "ART_1_25": "Ein Artikel"}), encoding="utf-8")
    return target


@pytest.fixture
def app_config(artikel_file: Path) -> AppConfig:
    resources = [
        {
            "data_source": {"type": "File", "file": str(artikel_file)},
            "function": "ARTIKEL",
            "method": "GET",
            "revision": 3,
        },
        {
            "data_source": {"type": "String", "value": '{"ART_1_25": "Nur Bezeichnung"}'},
            "function": "ARTIKEL",
            "method": "GET",
            "revision": 3,
            "parameters": {"FELDER": "ART_1_25"},
        },
        {
            "data_source": {"type": "Empty"},
            "function": "ARTIKEL",
            "method": "PUT",
            "revision": 1,
            "parameters": {"ARTNR": "Artikel19Prozent", "ART_51_60": "Eine Bezeichnung"},
        },
        {
            "data_source": {"type": "String", "value": '{"ARTNR": "MeinArtikel"}'},
            "function": "ARTIKEL",
            "method": "INSERT",
            "revision": 2,
            "parameters": {"ARTNR": {"literal": "MeinArtikel"}},
        },
        {
            "data_source": {"type": "String", "value": '{"GET_RESULT": "Hallo"}'},
            "function": "GET_RELATION",
            "method": "EXEC",
            "revision": 1,
            "parameters": {"NR": "65", "P1": "Hallo"},
        },
    ]
    return AppConfig.model_validate(
        {
            "webware": {
                "webservices": {
                    "vendor_hash": VENDOR_HASH,
                    "application_hash": APP_HASH,
                    "version": VERSION,
                    "application_secret": SECRET,
                },
                "credentials": {"service_pass": SERVICE_PASS, "application_id": APPLICATION_ID},
            },
            "mock_resources": resources,
        }
    )


@pytest.fixture
def context(app_config: AppConfig) -> ServiceContext:
    return ServiceContext.from_config(app_config)


@pytest.fixture
def start_server() -> Iterator[Callable[[AppConfig], WebserviceServer]]:
    servers: list[WebserviceServer] = []

    def _start(config: AppConfig) -> WebserviceServer:
        server = WebserviceServer(ServiceContext.from_config(config), host="127.0.0.1", port=0)
        server.start()
        server.wait_until_ready()
        servers.append(server)
        return server

    yield _start
    for server in servers:
        server.stop()
