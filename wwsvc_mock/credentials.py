"""Service pass registration and deregistration.

Registration compares the caller's identity against the configured
backend identity and hands out the single process wide credential pair.
Deregistration walks a fixed sequence of checks; every failure is reported
as the same 404 so clients cannot tell an unknown pass from a bad hash.
"""

from __future__ import annotations

import hashlib
from typing import Mapping

import structlog

from . import envelope
from .envelope import ServiceResponse
from .models import UINT32_MAX, CredentialsConfig, WebservicesConfig

LOGGER = structlog.get_logger("wwsvc_mock.credentials")

LEGACY_CODEPAGE = "cp1252"
EXECUTE_MODES = frozenset({"SYNCHRON", "ASYNCHRON"})

HEADER_EXECUTE_MODE = "WWSVC-EXECUTE-MODE"
HEADER_REQUEST_ID = "WWSVC-REQID"
HEADER_TIMESTAMP = "WWSVC-TS"
HEADER_HASH = "WWSVC-HASH"
MANDATORY_HEADERS = (HEADER_EXECUTE_MODE, HEADER_REQUEST_ID, HEADER_TIMESTAMP, HEADER_HASH)


def legacy_codepage_bytes(text: str) -> bytes:
    """Encode ``text`` as Windows-1252, unmappable characters as ``&#NNNN;``."""

    return text.encode(LEGACY_CODEPAGE, errors="xmlcharrefreplace")


def service_pass_hash(application_id: str, timestamp: str) -> str:
    """Hash a client sends in ``WWSVC-HASH`` to prove it holds the application id."""

    return hashlib.md5(legacy_codepage_bytes(f"{application_id}{timestamp}")).hexdigest()


def parse_revision(raw: str) -> int | None:
    if not raw.isascii() or not raw.isdigit():
        return None
    revision = int(raw)
    if revision > UINT32_MAX:
        return None
    return revision


def register(
    identity: WebservicesConfig,
    credentials: CredentialsConfig,
    vendor_hash: str,
    app_hash: str,
    secret: str,
    revision: str,
) -> ServiceResponse:
    parsed_revision = parse_revision(revision)
    if parsed_revision is None:
        LOGGER.info("register_rejected", reason="malformed_revision", revision=revision)
        return envelope.register_rejected()
    if (
        vendor_hash != identity.vendor_hash
        or app_hash != identity.application_hash
        or secret != identity.application_secret
        or parsed_revision != identity.version
    ):
        LOGGER.info("register_rejected", reason="identity_mismatch")
        return envelope.register_rejected()
    LOGGER.info("register_accepted")
    return envelope.register_ok(credentials.service_pass, credentials.application_id)


def deregister(
    credentials: CredentialsConfig,
    service_pass: str,
    headers: Mapping[str, str],
) -> ServiceResponse:
    if service_pass != credentials.service_pass:
        return _reject("ServicePass not known")

    normalized = {key.upper(): value for key, value in headers.items()}
    if any(name not in normalized for name in MANDATORY_HEADERS):
        return _reject("Mandatory header missing")

    if normalized[HEADER_EXECUTE_MODE] not in EXECUTE_MODES:
        return _reject("Execute mode not known")

    expected = service_pass_hash(credentials.application_id, normalized[HEADER_TIMESTAMP])
    if normalized[HEADER_HASH] != expected:
        return _reject("Hash not correct")

    LOGGER.info("deregister_accepted", request_id=normalized[HEADER_REQUEST_ID])
    return envelope.deregister_ok()


def _reject(reason: str) -> ServiceResponse:
    LOGGER.info("deregister_rejected", reason=reason)
    return envelope.deregister_rejected(reason)
