"""Connectivity prober: is a base URL a live, API-shaped endpoint?"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from core.errors import ConfigurationError, TransportError
from core.service_role import ServiceRole
from core.urls import join_endpoint, normalize_base_url

if TYPE_CHECKING:
    from core.transport import HttpTransport

logger = logging.getLogger(__name__)

# Common REST, OpenAI-style and Ollama-style routes, tried in this order.
COMMON_ENDPOINTS = (
    "/health",
    "/status",
    "/",
    "/docs",
    "/api",
    "/v1",
    "/v1/models",
    "/v1/audio/transcriptions",
    "/v1/audio/speech",
    "/v1/chat/completions",
    "/api/chat",
    "/api/generate",
    "/models",
)

# 401 and 405 prove the route exists even though the GET was refused.
_ROUTED_STATUSES = frozenset({401, 405})


@dataclass(frozen=True)
class Reachable:
    pass


@dataclass(frozen=True)
class ReachableWithEndpoints:
    endpoints: tuple[str, ...]


@dataclass(frozen=True)
class Degraded:
    status: int
    status_text: str = ""

    @property
    def server_error(self) -> bool:
        return self.status >= 500


@dataclass(frozen=True)
class Unreachable:
    error: str


ProbeResult = Union[Reachable, ReachableWithEndpoints, Degraded, Unreachable]


def _endpoint_found(status: int) -> bool:
    return 200 <= status < 300 or status in _ROUTED_STATUSES


class ConnectivityProber:
    """Staged probe cascade over an injected transport.

    Requests are issued one at a time and never carry credentials.
    """

    def __init__(self, transport: "HttpTransport", endpoints=COMMON_ENDPOINTS):
        self.transport = transport
        self.endpoints = tuple(endpoints)

    def probe(self, base_url: str, role) -> ProbeResult:
        try:
            role = ServiceRole.parse(role)
            clean_url = normalize_base_url(base_url)
        except ConfigurationError as e:
            return Unreachable(str(e))

        logger.debug("Probe [%s] GET %s", role.value, clean_url)
        try:
            if self.transport.request("GET", clean_url, {}).ok:
                return Reachable()
        except TransportError as e:
            logger.debug("Probe [%s] root request failed: %s", role.value, e)

        found = self._scan_endpoints(clean_url, role)
        if found:
            return ReachableWithEndpoints(tuple(found))

        try:
            head = self.transport.request("HEAD", clean_url, {})
        except TransportError as e:
            logger.warning("Probe [%s] connection failed on %s: %s", role.value, clean_url, e)
            return Unreachable(str(e) or "Unknown error")
        return Degraded(head.status, head.status_text)

    def _scan_endpoints(self, clean_url: str, role: ServiceRole) -> list[str]:
        found = []
        for endpoint in self.endpoints:
            url = join_endpoint(clean_url, endpoint)
            try:
                resp = self.transport.request("GET", url, {})
            except TransportError as e:
                logger.debug("Probe [%s] %s skipped: %s", role.value, url, e)
                continue
            if _endpoint_found(resp.status):
                found.append(endpoint)
        logger.debug("Probe [%s] found endpoints: %s", role.value, found)
        return found


def describe_probe_result(result: ProbeResult) -> str:
    """Render a probe result as the settings page status line."""
    if isinstance(result, Reachable):
        return "Server reachable and responding"
    if isinstance(result, ReachableWithEndpoints):
        return f"Server reachable. Found endpoints: {', '.join(result.endpoints)}"
    if isinstance(result, Degraded):
        if result.server_error:
            return f"Server error: {result.status} {result.status_text}".rstrip()
        return f"Server reachable but API endpoints not found. Status: {result.status}"
    return f"Connection failed: {result.error}"


def probe_succeeded(result: ProbeResult) -> bool:
    if isinstance(result, (Reachable, ReachableWithEndpoints)):
        return True
    return isinstance(result, Degraded) and not result.server_error
