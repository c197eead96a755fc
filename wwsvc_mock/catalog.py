"""Ordered, read-only catalog of mock resources."""

from __future__ import annotations

from typing import Iterable, Iterator

import structlog

from .messages import WebserviceParameter, WebserviceRequest
from .models import MockResource

LOGGER = structlog.get_logger("wwsvc_mock.catalog")


class ResourceCatalog:
    """Matches incoming function calls against configured resources.

    Candidates are tried in configuration order and the first one whose
    parameters are satisfied wins; there is no specificity ranking. The
    request revision is not compared against the resource revision.
    """

    def __init__(self, resources: Iterable[MockResource]) -> None:
        self._resources: tuple[MockResource, ...] = tuple(resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[MockResource]:
        return iter(self._resources)

    def lookup(self, request: WebserviceRequest) -> MockResource | None:
        split = request.split_function()
        if split is None:
            LOGGER.debug("lookup_malformed_function", function=request.function_name)
            return None
        function, method = split
        for resource in self._resources:
            if resource.function != function or resource.method != method:
                continue
            if _parameters_match(resource, request.parameters):
                return resource
        return None


def _parameters_match(resource: MockResource, parameters: tuple[WebserviceParameter, ...]) -> bool:
    if resource.parameters is None:
        return not parameters
    # extra request parameters are ignored
    for name, expected in resource.parameters.items():
        if not any(param.name == name and expected.matches(param.value) for param in parameters):
            return False
    return True
