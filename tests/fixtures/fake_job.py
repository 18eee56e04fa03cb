#!/usr/bin/env python3
"""Fake job for lifecycle testing.

This script simulates an external command: it sleeps, then exits with a
chosen code. A Job passes exactly one argument (this script's path), so
the behaviour is read from a JSON file next to the script with the same
stem (``fake_job_3.py`` reads ``fake_job_3.json``).

Settings:
    duration: Seconds to sleep before exiting (default: 0)
    exit_code: Exit code (default: 0)
    ignore_term: Ignore SIGTERM, so only SIGKILL stops the job
    ready_file: Path touched once signal handling is set up
"""

from __future__ import annotations

import json
import signal
import sys
import time
from pathlib import Path
from typing import NoReturn


def load_settings() -> dict:
    """Read the settings file that sits next to this script."""
    settings_file = Path(__file__).with_suffix(".json")
    if not settings_file.exists():
        return {}
    return json.loads(settings_file.read_text(encoding="utf-8"))


def main() -> NoReturn:
    """Main entry point."""
    settings = load_settings()

    if settings.get("ignore_term"):
        signal.signal(signal.SIGTERM, signal.SIG_IGN)

    # Signal handling is in place; tell the test it can send signals now
    ready_file = settings.get("ready_file")
    if ready_file:
        Path(ready_file).touch()

    time.sleep(float(settings.get("duration", 0.0)))
    sys.exit(int(settings.get("exit_code", 0)))


if __name__ == "__main__":
    main()
