"""Service roles and the per-role descriptor table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from core.errors import ConfigurationError


class ServiceRole(str, Enum):
    STT = "stt"
    TTS = "tts"
    CHAT = "chat"

    @classmethod
    def parse(cls, value) -> "ServiceRole":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown service role: {value!r}") from None


def _is_whisper_model(model_id: str) -> bool:
    return "whisper" in model_id.lower()


def _is_speech_model(model_id: str) -> bool:
    return not _is_whisper_model(model_id)


def _accept_all(_model_id: str) -> bool:
    return True


@dataclass(frozen=True)
class RoleProfile:
    """Where a role's settings live and how its catalog is read."""

    label: str
    url_key: str
    api_key_key: str
    model_key: str
    catalog_path: str
    list_key: str
    id_field: str
    model_filter: Callable[[str], bool]


ROLE_PROFILES: dict[ServiceRole, RoleProfile] = {
    ServiceRole.STT: RoleProfile(
        label="Speech-to-Text",
        url_key="sttUrl",
        api_key_key="sttApiKey",
        model_key="sttModel",
        catalog_path="/v1/models",
        list_key="data",
        id_field="id",
        model_filter=_is_whisper_model,
    ),
    ServiceRole.TTS: RoleProfile(
        label="Text-to-Speech",
        url_key="ttsUrl",
        api_key_key="ttsApiKey",
        model_key="ttsModel",
        catalog_path="/v1/models",
        list_key="data",
        id_field="id",
        model_filter=_is_speech_model,
    ),
    ServiceRole.CHAT: RoleProfile(
        label="Chat Model",
        url_key="ollamaUrl",
        api_key_key="ollamaApiKey",
        model_key="ollamaModel",
        catalog_path="/api/tags",
        list_key="models",
        id_field="name",
        model_filter=_accept_all,
    ),
}


def role_profile(role) -> RoleProfile:
    return ROLE_PROFILES[ServiceRole.parse(role)]
