"""HTTP transport seam used by the prober and the catalog resolver."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from core.errors import DecodeError, TransportError
from core.http_client import DEFAULT_TIMEOUT_SECONDS, get_shared_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    status: int
    status_text: str = ""
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self):
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"Response was not valid JSON: {e}") from e


class HttpTransport(Protocol):
    def request(self, method: str, url: str, headers: dict[str, str] | None = None) -> HttpResponse:
        """Issue one request. Raises TransportError when no response arrives."""


class HttpxTransport:
    """Transport backed by the shared pooled httpx client."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        follow_redirects: bool = True,
    ):
        self._client = client
        self.timeout = timeout
        self.follow_redirects = follow_redirects

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            return get_shared_client(self.timeout)
        return self._client

    def request(self, method: str, url: str, headers: dict[str, str] | None = None) -> HttpResponse:
        try:
            resp = self.client.request(
                method.upper(),
                url,
                headers=dict(headers or {}),
                follow_redirects=self.follow_redirects,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e
        return HttpResponse(
            status=resp.status_code,
            status_text=resp.reason_phrase or "",
            body=resp.content,
        )
