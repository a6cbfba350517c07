"""Model catalog resolver for OpenAI-style and Ollama-style servers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from core.credentials import parse_credential
from core.errors import (
    DecodeError,
    HttpStatusError,
    ServiceCheckError,
    TransportError,
)
from core.service_role import RoleProfile, role_profile
from core.urls import join_endpoint, normalize_base_url

if TYPE_CHECKING:
    from core.credentials import Credential
    from core.transport import HttpTransport

logger = logging.getLogger(__name__)

ModelCatalog = tuple[str, ...]


@dataclass(frozen=True)
class ModelFetchError:
    message: str
    status: Optional[int] = None
    status_text: str = ""


class ModelCatalogResolver:
    """Lists the models a service exposes for one role.

    Every call re-fetches; nothing is cached between calls.
    """

    def __init__(self, transport: "HttpTransport"):
        self.transport = transport

    def list_models(
        self,
        base_url: str,
        role,
        credential: "Credential | str | None" = None,
    ) -> Union[ModelCatalog, ModelFetchError]:
        try:
            return self.fetch_models(base_url, role, credential)
        except HttpStatusError as e:
            return ModelFetchError(str(e), status=e.status, status_text=e.status_text)
        except ServiceCheckError as e:
            return ModelFetchError(str(e) or "Unknown error")

    def fetch_models(self, base_url: str, role, credential=None) -> ModelCatalog:
        """Like list_models, but raises ServiceCheckError subclasses."""
        profile = role_profile(role)
        endpoint = join_endpoint(normalize_base_url(base_url), profile.catalog_path)
        headers = parse_credential(credential).authorization_headers()

        logger.debug("Model catalog request -> %s | auth=%s", endpoint, bool(headers))
        try:
            resp = self.transport.request("GET", endpoint, headers)
        except TransportError:
            logger.warning("Model catalog request failed on %s", endpoint, exc_info=True)
            raise
        if not resp.ok:
            logger.warning("Model catalog request on %s returned HTTP %d", endpoint, resp.status)
            raise HttpStatusError(resp.status, resp.status_text)

        model_ids = self._extract_model_ids(resp.json(), profile)
        return tuple(model_id for model_id in model_ids if profile.model_filter(model_id))

    @staticmethod
    def _extract_model_ids(payload, profile: RoleProfile) -> list[str]:
        if not isinstance(payload, dict):
            raise DecodeError("Model catalog response is not a JSON object.")
        items = payload.get(profile.list_key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise DecodeError(f"Model catalog field '{profile.list_key}' is not a list.")

        model_ids = []
        for item in items:
            if not isinstance(item, dict):
                continue
            model_id = item.get(profile.id_field)
            if isinstance(model_id, str) and model_id:
                model_ids.append(model_id)
        return model_ids

