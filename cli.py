#!/usr/bin/env python3
"""Headless VoxBridge: check configured services without a GUI.

Usage:
    python cli.py probe stt                       # Test the STT server
    python cli.py models tts --url http://host    # List TTS models
    python cli.py prefs set ollamaModel mistral   # Edit a saved preference
"""

import os
import sys

sys.path.insert(0, os.path.dirname(__file__))

from core.cli_runtime import run_cli


def main() -> int:
    return run_cli()


if __name__ == "__main__":
    sys.exit(main())
