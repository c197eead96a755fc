"""Wire models for WEBSERVICE requests and registration payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownMethodError
from .models import UINT32_MAX, ResourceMethod


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class WebserviceParameter(_WireModel):
    name: str = Field(alias="PNAME")
    value: str = Field(alias="PCONTENT")


class WebserviceFunction(_WireModel):
    function_name: str = Field(alias="FUNCTIONNAME")
    revision: int = Field(alias="REVISION", ge=0, le=UINT32_MAX)
    parameters: tuple[WebserviceParameter, ...] = Field(default=(), alias="PARAMETER")


class WebservicePassInfo(_WireModel):
    """Calling convention metadata; not used for resource matching."""

    service_pass: str = Field(alias="SERVICEPASS")
    app_hash: str = Field(alias="APPHASH")
    timestamp: str = Field(alias="TIMESTAMP")
    request_id: int = Field(alias="REQUESTID", ge=0)
    execute_mode: str = Field(alias="EXECUTE_MODE")


class WebserviceRequest(_WireModel):
    """Body of an ``EXECJSON`` call."""

    function: WebserviceFunction = Field(alias="WWSVC_FUNCTION")
    pass_info: WebservicePassInfo | None = Field(default=None, alias="WWSVC_PASSINFO")

    @property
    def function_name(self) -> str:
        return self.function.function_name

    @property
    def parameters(self) -> tuple[WebserviceParameter, ...]:
        return self.function.parameters

    def split_function(self) -> tuple[str, ResourceMethod] | None:
        """Split ``<FUNCTION>.<METHOD>``; ``None`` for any other shape or unknown method."""

        parts = self.function.function_name.split(".")
        if len(parts) != 2:
            return None
        name, token = parts
        try:
            return name, ResourceMethod.parse(token)
        except UnknownMethodError:
            return None


class ServicePass(_WireModel):
    pass_id: str = Field(alias="PASSID")
    app_id: str = Field(alias="APPID")
