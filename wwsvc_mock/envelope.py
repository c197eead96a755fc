"""COMRESULT envelope wrapping every WEBSERVICE response."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .messages import ServicePass

COMRESULT_KEY = "COMRESULT"
BEREICH_WWSVC = "WWSVC"


class ComResult(BaseModel):
    """Result wrapper; ``status``, ``code`` and ``info`` are mandatory."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: int = Field(alias="STATUS", ge=0)
    code: str = Field(alias="CODE")
    info: str = Field(alias="INFO")
    info2: str | None = Field(default=None, alias="INFO2")
    info3: str | None = Field(default=None, alias="INFO3")
    errno: str | None = Field(default=None, alias="ERRNO")
    bereich: str | None = Field(default=None, alias="BEREICH")
    errnotxt: str | None = Field(default=None, alias="ERRNOTXT")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ServiceResponse:
    """A COMRESULT plus body fields flattened next to it on the wire."""

    comresult: ComResult
    body: Mapping[str, Any] | None = None

    @property
    def http_status(self) -> int:
        status = self.comresult.status
        if 100 <= status <= 999:
            return status
        return HTTPStatus.INTERNAL_SERVER_ERROR.value

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {COMRESULT_KEY: self.comresult.to_wire()}
        for key, value in (self.body or {}).items():
            if key != COMRESULT_KEY:
                payload[key] = value
        return payload

    def to_json(self) -> bytes:
        return json.dumps(self.to_payload(), ensure_ascii=False).encode("utf-8")


def exec_ok(body: Mapping[str, Any] | None) -> ServiceResponse:
    comresult = ComResult(
        status=HTTPStatus.OK,
        code="200 OK",
        info="Kein Fehler",
        info2="",
        info3="",
        errno="0",
        bereich=BEREICH_WWSVC,
        errnotxt="SVCERR_NO_ERROR (0)",
    )
    return ServiceResponse(comresult, body)


def unknown_function(function_name: str) -> ServiceResponse:
    comresult = ComResult(
        status=HTTPStatus.BAD_REQUEST,
        code="400 Bad Request",
        info="Es wurde eine fehlerhafte Anforderung übergeben.",
        info2="Funktionsname nicht bekannt.",
        info3=function_name,
        errno="20",
        bereich=BEREICH_WWSVC,
        errnotxt="SVCERR_UNKNOWN_FUNCTION (20)",
    )
    return ServiceResponse(comresult)


def bad_request(detail: str) -> ServiceResponse:
    comresult = ComResult(
        status=HTTPStatus.BAD_REQUEST,
        code="400 Bad Request",
        info="Es wurde eine fehlerhafte Anforderung übergeben.",
        info2=detail,
        bereich=BEREICH_WWSVC,
    )
    return ServiceResponse(comresult)


def register_ok(service_pass: str, application_id: str) -> ServiceResponse:
    comresult = ComResult(status=HTTPStatus.OK, code="200 OK", info="REGISTER OK")
    service_pass_body = ServicePass(pass_id=service_pass, app_id=application_id)
    return ServiceResponse(comresult, {"SERVICEPASS": service_pass_body.model_dump(by_alias=True)})


def register_rejected() -> ServiceResponse:
    comresult = ComResult(
        status=HTTPStatus.NOT_ACCEPTABLE,
        code="406 Not Acceptable",
        info="REGISTER is not possible",
    )
    return ServiceResponse(comresult)


def deregister_ok() -> ServiceResponse:
    comresult = ComResult(status=HTTPStatus.OK, code="200 OK", info="SERVICEPASS DEREGISTERED")
    return ServiceResponse(comresult)


def deregister_rejected(reason: str) -> ServiceResponse:
    """All deregistration failures share one shape; only INFO2 names the cause."""

    comresult = ComResult(
        status=HTTPStatus.NOT_FOUND,
        code="404 Resource not found",
        info="ERROR ServicePass not known",
        info2=f"wwsvc-mock: {reason}",
    )
    return ServiceResponse(comresult)
