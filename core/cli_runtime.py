"""Headless CLI runtime wiring for VoxBridge."""

import argparse
import logging
import sys
from collections.abc import Sequence

from core.app_config import AppConfig
from core.connectivity import describe_probe_result, probe_succeeded
from core.errors import ConfigurationError, PreferenceSaveError
from core.http_client import close_shared_client
from core.model_catalog import ModelFetchError
from core.preferences import (
    JsonPreferenceStore,
    export_preferences,
    import_preferences,
    save_preferences,
)
from core.service_role import ServiceRole, role_profile
from core.settings_controller import SAVE_OK_MESSAGE, ServiceSettingsController

_ROLE_CHOICES = [role.value for role in ServiceRole]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="VoxBridge service settings checker")
    parser.add_argument("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_probe = sub.add_parser("probe", help="Test whether a service is reachable")
    p_probe.add_argument("role", choices=_ROLE_CHOICES)
    p_probe.add_argument("--url", help="Base URL (defaults to the saved preference)")

    p_models = sub.add_parser("models", help="List the models a service exposes")
    p_models.add_argument("role", choices=_ROLE_CHOICES)
    p_models.add_argument("--url", help="Base URL (defaults to the saved preference)")
    p_models.add_argument("--api-key", help="API key or env:NAME (defaults to the saved preference)")

    p_prefs = sub.add_parser("prefs", help="Show or edit saved preferences")
    prefs_sub = p_prefs.add_subparsers(dest="prefs_command", required=True)
    prefs_sub.add_parser("show", help="Print all preferences")
    p_set = prefs_sub.add_parser("set", help="Set one preference")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_export = prefs_sub.add_parser("export", help="Export preferences to a JSON file")
    p_export.add_argument("path")
    p_import = prefs_sub.add_parser("import", help="Import preferences from a JSON file")
    p_import.add_argument("path")
    return parser


def _configure_logging(level_name: str, log_file: str = ""):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, str(level_name or "").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=handlers,
    )


def _apply_overrides(controller: ServiceSettingsController, role: ServiceRole, url=None, api_key=None):
    profile = role_profile(role)
    if url is not None:
        controller.update_preference(profile.url_key, url)
    if api_key is not None:
        controller.update_preference(profile.api_key_key, api_key)


def cmd_probe(controller: ServiceSettingsController, role: ServiceRole, url=None) -> int:
    """Run the connectivity cascade and print the status line."""
    _apply_overrides(controller, role, url=url)
    result = controller.prober.probe(controller.base_url_for(role), role)
    message = describe_probe_result(result)
    if probe_succeeded(result):
        print(message)
        return 0
    print(f"[ERROR] {message}", file=sys.stderr)
    return 1


def cmd_models(controller: ServiceSettingsController, role: ServiceRole, url=None, api_key=None) -> int:
    """Print one model identifier per line."""
    _apply_overrides(controller, role, url=url, api_key=api_key)
    result = controller.fetch_models_sync(role)
    if isinstance(result, ModelFetchError):
        print(f"[ERROR] {controller.model_errors[role]}", file=sys.stderr)
        return 1
    for model_id in result:
        print(model_id)
    if not result:
        print("[INFO] No models available", file=sys.stderr)
    return 0


def cmd_prefs(controller: ServiceSettingsController, args) -> int:
    if args.prefs_command == "show":
        for key, value in controller.preferences.as_dict().items():
            print(f"{key}={value}")
        return 0
    if args.prefs_command == "set":
        controller.update_preference(args.key, args.value)
        message = controller.save()
        if message != SAVE_OK_MESSAGE:
            print(f"[ERROR] {message}", file=sys.stderr)
            return 1
        print(message, file=sys.stderr)
        return 0
    if args.prefs_command == "export":
        target = export_preferences(controller.preferences, args.path)
        print(f"Preferences exported to {target}", file=sys.stderr)
        return 0
    if args.prefs_command == "import":
        controller.preferences = import_preferences(args.path)
        save_preferences(controller.store, controller.preferences)
        print(f"Preferences imported from {args.path}", file=sys.stderr)
        return 0
    return 2


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = AppConfig.from_env()
    _configure_logging(args.log_level or config.log_level, config.log_file)

    try:
        controller = ServiceSettingsController(config, JsonPreferenceStore(config.settings_path))
        if args.command == "probe":
            return cmd_probe(controller, ServiceRole.parse(args.role), url=args.url)
        if args.command == "models":
            return cmd_models(controller, ServiceRole.parse(args.role), url=args.url, api_key=args.api_key)
        if args.command == "prefs":
            return cmd_prefs(controller, args)
        parser.error(f"Unknown command: {args.command}")
        return 2
    except (ConfigurationError, PreferenceSaveError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    finally:
        close_shared_client()
