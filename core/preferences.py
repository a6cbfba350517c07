"""Flat service preferences with defaults and key-by-key persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from core.errors import ConfigurationError, PreferenceSaveError

logger = logging.getLogger(__name__)

DEFAULT_SPEACHES_URL = "https://speaches.serveur.au"
DEFAULT_OLLAMA_URL = "https://ollama.serveur.au"
VOICE_CHOICES = ("male", "female")

DEFAULT_PREFERENCES = {
    "speachesUrl": DEFAULT_SPEACHES_URL,
    "sttUrl": DEFAULT_SPEACHES_URL,
    "ttsUrl": DEFAULT_SPEACHES_URL,
    "sttApiKey": "",
    "ttsApiKey": "",
    "ollamaUrl": DEFAULT_OLLAMA_URL,
    "ollamaApiKey": "",
    "ollamaModel": "llama2",
    "voice": "male",
    "sttModel": "Systran/faster-distil-whisper-small.en",
    "ttsModel": "speaches-ai/Kokoro-82M-v1.0-ONNX-int8",
    "maleTTSModel": "speaches-ai/piper-en_GB-alan-low",
    "femaleTTSModel": "speaches-ai/piper-en_US-amy-low",
    "maleVoice": "alan",
    "femaleVoice": "amy",
    "ttsSpeed": "1.25",
}

# Keys whose default follows another stored key before the built-in default.
_FALLBACK_KEYS = {
    "sttUrl": "speachesUrl",
    "ttsUrl": "speachesUrl",
}


class PreferenceStore(Protocol):
    def get_all(self) -> dict[str, str]:
        ...

    def set(self, key: str, value: str) -> None:
        """Persist one key. Raises on failure."""


class MemoryPreferenceStore:
    def __init__(self, values: dict | None = None):
        self.values: dict[str, str] = dict(values or {})

    def get_all(self) -> dict[str, str]:
        return dict(self.values)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonPreferenceStore:
    """Stores preferences as a flat JSON object; each set replaces the file."""

    def __init__(self, path):
        self.path = Path(path)

    def get_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            loaded = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read preferences from %s: %s", self.path, e)
            return {}
        if not isinstance(loaded, dict):
            return {}
        return {str(k): v for k, v in loaded.items() if isinstance(v, str)}

    def set(self, key: str, value: str) -> None:
        payload = self.get_all()
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


class Preferences:
    """In-memory preference set, edited key by key and flushed on save."""

    def __init__(self, values: dict | None = None):
        self._values = dict(DEFAULT_PREFERENCES)
        if values:
            for key, value in values.items():
                self.update(key, value)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def get(self, key: str, default: str = "") -> str:
        return self._values.get(key, default)

    def update(self, key: str, value) -> None:
        if key not in DEFAULT_PREFERENCES:
            raise ConfigurationError(f"Unknown preference key: {key}")
        text = "" if value is None else str(value)
        if key == "voice" and text not in VOICE_CHOICES:
            raise ConfigurationError(f"Voice must be one of: {', '.join(VOICE_CHOICES)}")
        if key == "ttsSpeed":
            _coerce_speed(text)
        self._values[key] = text

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    @property
    def tts_speed(self) -> float:
        return _coerce_speed(self._values["ttsSpeed"])


def _coerce_speed(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"TTS speed must be a number, got {value!r}") from None


def _resolve_loaded(raw: dict) -> dict[str, str]:
    resolved = {}
    for key, default in DEFAULT_PREFERENCES.items():
        value = raw.get(key)
        if isinstance(value, str) and value:
            resolved[key] = value
            continue
        fallback_key = _FALLBACK_KEYS.get(key)
        fallback = raw.get(fallback_key) if fallback_key else None
        resolved[key] = fallback if isinstance(fallback, str) and fallback else default
    if resolved["voice"] not in VOICE_CHOICES:
        resolved["voice"] = DEFAULT_PREFERENCES["voice"]
    try:
        float(resolved["ttsSpeed"])
    except ValueError:
        resolved["ttsSpeed"] = DEFAULT_PREFERENCES["ttsSpeed"]
    return resolved


def load_preferences(store: PreferenceStore) -> Preferences:
    try:
        raw = store.get_all()
    except Exception as e:
        logger.error("Failed to load preferences: %s", e)
        raw = {}
    return Preferences(_resolve_loaded(raw or {}))


def save_preferences(store: PreferenceStore, prefs: Preferences) -> None:
    """Write each key independently, stopping at the first failure.

    Keys written before the failure stay written; the error does not say
    which ones.
    """
    for key, value in prefs.as_dict().items():
        try:
            store.set(key, value)
        except Exception as e:
            logger.error("Failed to save preferences: %s", e)
            raise PreferenceSaveError("Failed to save settings.") from e


def export_preferences(prefs: Preferences, path) -> Path:
    target = Path(path)
    target.write_text(json.dumps(prefs.as_dict(), indent=2), encoding="utf-8")
    logger.info("Exported preferences to %s", target)
    return target


def import_preferences(path) -> Preferences:
    source = Path(path)
    try:
        loaded = json.loads(source.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigurationError(f"Could not import preferences from {source}: {e}") from e
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Preferences file {source} is not a JSON object.")
    return Preferences(_resolve_loaded(loaded))
