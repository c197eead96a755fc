"""Request handlers for the WWSVC endpoints.

Handlers are plain functions of the service context and the request data;
client-facing failures come back as ``ServiceResponse`` values. Only broken
operator configuration (unreadable or malformed mock data) raises.
"""

from __future__ import annotations

from typing import Mapping

import structlog
from pydantic import ValidationError

from . import credentials, envelope
from .config import ServiceContext
from .envelope import ServiceResponse
from .messages import WebserviceRequest

LOGGER = structlog.get_logger("wwsvc_mock.handlers")


def exec_json(context: ServiceContext, body: bytes) -> ServiceResponse:
    try:
        request = WebserviceRequest.model_validate_json(body or b"{}")
    except ValidationError as exc:
        LOGGER.warning("exec_request_invalid", errors=exc.error_count())
        return envelope.bad_request(f"Anforderung nicht lesbar: {exc.error_count()} Fehler")

    resource = context.catalog.lookup(request)
    if resource is None:
        LOGGER.info(
            "function_unknown",
            function=request.function_name,
            parameters=len(request.parameters),
        )
        return envelope.unknown_function(request.function_name)

    LOGGER.info("resource_matched", function=request.function_name, resource=resource.describe())
    return envelope.exec_ok(resource.data_source.as_json())


def handle_register(
    context: ServiceContext,
    vendor_hash: str,
    app_hash: str,
    secret: str,
    revision: str,
) -> ServiceResponse:
    return credentials.register(
        context.identity,
        context.credentials,
        vendor_hash,
        app_hash,
        secret,
        revision,
    )


def handle_deregister(
    context: ServiceContext,
    service_pass: str,
    headers: Mapping[str, str],
) -> ServiceResponse:
    return credentials.deregister(context.credentials, service_pass, headers)
