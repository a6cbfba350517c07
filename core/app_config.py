"""Application configuration as an injectable dataclass."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_DEFAULT_SETTINGS_PATH = str(Path(__file__).resolve().parent.parent / "settings.json")


def _coerce_float(value, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


@dataclass
class AppConfig:
    """Application configuration loaded from environment variables."""

    # Preferences
    settings_path: str = _DEFAULT_SETTINGS_PATH

    # HTTP
    http_timeout: float = 30.0
    follow_redirects: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @staticmethod
    def from_env() -> "AppConfig":
        """Load config from .env file and environment variables."""
        load_dotenv()
        return AppConfig(
            settings_path=os.getenv("VOXBRIDGE_SETTINGS_PATH", "").strip() or _DEFAULT_SETTINGS_PATH,
            http_timeout=_coerce_float(os.getenv("VOXBRIDGE_HTTP_TIMEOUT", "30"), 30.0),
            follow_redirects=os.getenv("VOXBRIDGE_FOLLOW_REDIRECTS", "1").strip().lower() not in {"0", "false", "no"},
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", "").strip(),
        )
