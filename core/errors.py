"""Error types raised inside the service-check core.

``probe`` and ``list_models`` convert these into result values; they only
escape from lower-level helpers and from preference saves.
"""


class ServiceCheckError(RuntimeError):
    """Base class for service-check failures."""


class TransportError(ServiceCheckError):
    """DNS, connection or timeout failure reported by the transport."""


class HttpStatusError(ServiceCheckError):
    def __init__(self, status: int, status_text: str = ""):
        self.status = int(status)
        self.status_text = str(status_text or "").strip()
        label = f"HTTP {self.status}"
        if self.status_text:
            label = f"{label}: {self.status_text}"
        super().__init__(label)


class DecodeError(ServiceCheckError):
    """Response body does not match the expected schema."""


class ConfigurationError(ServiceCheckError):
    """A required setting is missing or invalid."""


class PreferenceSaveError(ServiceCheckError):
    """One or more preference keys could not be written."""
