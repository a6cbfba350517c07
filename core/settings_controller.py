"""Settings controller: per-role test and model-list state without a UI toolkit."""

import logging
import threading
from typing import Callable, Optional

from core.app_config import AppConfig
from core.connectivity import ConnectivityProber, describe_probe_result
from core.credentials import EnvCredential, parse_credential
from core.errors import PreferenceSaveError
from core.model_catalog import ModelCatalogResolver, ModelFetchError
from core.preferences import PreferenceStore, load_preferences, save_preferences
from core.service_role import ServiceRole, role_profile
from core.transport import HttpTransport, HttpxTransport

logger = logging.getLogger(__name__)

SAVE_OK_MESSAGE = "Settings saved successfully!"
SAVE_FAILED_MESSAGE = "Failed to save settings. Please try again."


def _per_role(value_factory):
    return {role: value_factory() for role in ServiceRole}


class ServiceSettingsController:
    """Holds the settings page state for the three service roles.

    Background methods report through ``on_change(role)``, invoked from
    worker threads. UI code must handle thread-safety (e.g., via Qt signals
    or other mechanisms).
    """

    def __init__(
        self,
        config: AppConfig,
        store: PreferenceStore,
        transport: Optional[HttpTransport] = None,
        on_change: Optional[Callable[[Optional[ServiceRole]], None]] = None,
    ):
        self.config = config
        self.store = store
        self.transport = transport or HttpxTransport(
            timeout=config.http_timeout,
            follow_redirects=config.follow_redirects,
        )
        self.prober = ConnectivityProber(self.transport)
        self.resolver = ModelCatalogResolver(self.transport)
        self.preferences = load_preferences(store)
        self._on_change = on_change
        self._lock = threading.Lock()

        self.testing = _per_role(bool)
        self.test_results = _per_role(str)
        self.models = _per_role(tuple)
        self.loading = _per_role(bool)
        self.model_errors = _per_role(str)
        self.saving = False
        self.status_message = ""

    # -- Preference accessors --

    def base_url_for(self, role) -> str:
        return self.preferences[role_profile(role).url_key]

    def credential_for(self, role):
        return parse_credential(self.preferences[role_profile(role).api_key_key])

    def model_for(self, role) -> str:
        return self.preferences[role_profile(role).model_key]

    def update_preference(self, key: str, value):
        self.preferences.update(key, value)

    def credential_hint(self, role) -> str:
        if isinstance(self.credential_for(role), EnvCredential):
            return "Using environment variable for authentication"
        return "API key for authentication (leave empty for local services)"

    def is_custom_model(self, role) -> bool:
        """True when the configured model is not one the server listed."""
        role = ServiceRole.parse(role)
        value = self.model_for(role)
        with self._lock:
            models = self.models[role]
        return bool(value) and bool(models) and value not in models

    # -- Test action --

    def test_service(self, role):
        """Probe the role's base URL in a background thread."""
        role = ServiceRole.parse(role)
        threading.Thread(target=self.test_service_sync, args=(role,), daemon=True).start()

    def test_service_sync(self, role) -> str:
        role = ServiceRole.parse(role)
        base_url = self.base_url_for(role)
        with self._lock:
            self.testing[role] = True
            self.test_results[role] = ""
        self._notify(role)

        try:
            message = describe_probe_result(self.prober.probe(base_url, role))
        except Exception as e:
            logger.error("Service test failed for %s: %s", role.value, e)
            message = f"Connection failed: {e or 'Unknown error'}"
        finally:
            with self._lock:
                self.testing[role] = False

        with self._lock:
            self.test_results[role] = message
        logger.info("Service test [%s]: %s", role.value, message)
        self._notify(role)
        return message

    # -- Model list refresh --

    def fetch_models(self, role):
        """Refresh the role's model list in a background thread."""
        role = ServiceRole.parse(role)
        threading.Thread(target=self.fetch_models_sync, args=(role,), daemon=True).start()

    def fetch_models_sync(self, role):
        role = ServiceRole.parse(role)
        with self._lock:
            self.loading[role] = True
            self.model_errors[role] = ""
        self._notify(role)

        try:
            result = self.resolver.list_models(
                self.base_url_for(role),
                role,
                self.credential_for(role),
            )
        except Exception as e:
            logger.error("Model fetch failed for %s: %s", role.value, e)
            result = ModelFetchError(str(e) or "Unknown error")
        finally:
            with self._lock:
                self.loading[role] = False

        with self._lock:
            if isinstance(result, ModelFetchError):
                self.model_errors[role] = f"Failed to fetch models: {result.message}"
            else:
                self.models[role] = result
        self._notify(role)
        return result

    # -- Save --

    def save(self) -> str:
        self.saving = True
        self.status_message = ""
        try:
            save_preferences(self.store, self.preferences)
            self.status_message = SAVE_OK_MESSAGE
        except PreferenceSaveError:
            self.status_message = SAVE_FAILED_MESSAGE
        finally:
            self.saving = False
        self._notify(None)
        return self.status_message

    def _notify(self, role: Optional[ServiceRole]):
        if self._on_change:
            self._on_change(role)
