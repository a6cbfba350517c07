"""Public core APIs for composition roots and external integrations."""

from core.app_config import AppConfig
from core.connectivity import (
    ConnectivityProber,
    Degraded,
    Reachable,
    ReachableWithEndpoints,
    Unreachable,
    describe_probe_result,
)
from core.credentials import EnvCredential, LiteralCredential, parse_credential
from core.http_client import close_shared_client, get_shared_client
from core.model_catalog import ModelCatalogResolver, ModelFetchError
from core.preferences import JsonPreferenceStore, MemoryPreferenceStore, Preferences
from core.service_role import ServiceRole
from core.settings_controller import ServiceSettingsController
from core.transport import HttpResponse, HttpxTransport

__all__ = [
    "AppConfig",
    "ConnectivityProber",
    "Degraded",
    "EnvCredential",
    "HttpResponse",
    "HttpxTransport",
    "JsonPreferenceStore",
    "LiteralCredential",
    "MemoryPreferenceStore",
    "ModelCatalogResolver",
    "ModelFetchError",
    "Preferences",
    "Reachable",
    "ReachableWithEndpoints",
    "ServiceRole",
    "ServiceSettingsController",
    "Unreachable",
    "describe_probe_result",
    "get_shared_client",
    "close_shared_client",
    "parse_credential",
]
