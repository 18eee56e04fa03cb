"""Job dispatcher environment configuration.

Environment variables:
    JD_POLL_INTERVAL: Seconds between status checks while waiting
        - default 0.05
        - clamped to the 0.001-5.0 range

    JD_TERM_TIMEOUT: Seconds to wait for a child to exit after SIGTERM
        - default 2.0

    JD_KILL_TIMEOUT: Seconds to wait for a child to exit after SIGKILL
        - default 1.0

    JD_LOG_DEBUG: Debug logging
        - true/1/yes = on (logs go to a temp file)
        - false/0/no = off (default, logs go to stderr)
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

__all__ = ["Config", "load_config", "get_config", "reload_config"]

DEFAULT_POLL_INTERVAL = 0.05
DEFAULT_TERM_TIMEOUT = 2.0
DEFAULT_KILL_TIMEOUT = 1.0


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_seconds(
    value: str | None,
    default: float,
    minimum: float = 0.0,
    maximum: float | None = None,
) -> float:
    """Parse a duration in seconds, falling back to ``default`` when invalid."""
    if not value:
        return default
    try:
        seconds = float(value)
    except ValueError:
        return default
    if seconds != seconds or seconds < 0:  # NaN or negative
        return default
    seconds = max(minimum, seconds)
    if maximum is not None:
        seconds = min(seconds, maximum)
    return seconds


@dataclass
class Config:
    """Job dispatcher configuration.

    Attributes:
        poll_interval: Seconds between status checks in ``Job.wait``
        term_timeout: Seconds to wait after SIGTERM before escalating
        kill_timeout: Seconds to wait after SIGKILL
        log_debug: Debug logging to a temp file
        log_file: Log file path (set automatically when log_debug=True)
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL
    term_timeout: float = DEFAULT_TERM_TIMEOUT
    kill_timeout: float = DEFAULT_KILL_TIMEOUT
    log_debug: bool = False
    log_file: str | None = None

    def __repr__(self) -> str:
        return (
            f"Config(poll_interval={self.poll_interval}, "
            f"term_timeout={self.term_timeout}, "
            f"kill_timeout={self.kill_timeout}, "
            f"log_debug={self.log_debug}, "
            f"log_file={self.log_file})"
        )


def _generate_log_file_path() -> str:
    """Build a timestamped log file path under the system temp dir."""
    log_dir = Path(tempfile.gettempdir()) / "job-dispatcher"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"jd_debug_{timestamp}.log"

    return str(log_file.resolve())


def load_config() -> Config:
    """Load configuration from the environment."""
    log_debug = _parse_bool(os.environ.get("JD_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    return Config(
        poll_interval=_parse_seconds(
            os.environ.get("JD_POLL_INTERVAL"),
            DEFAULT_POLL_INTERVAL,
            minimum=0.001,
            maximum=5.0,
        ),
        term_timeout=_parse_seconds(
            os.environ.get("JD_TERM_TIMEOUT"), DEFAULT_TERM_TIMEOUT
        ),
        kill_timeout=_parse_seconds(
            os.environ.get("JD_KILL_TIMEOUT"), DEFAULT_KILL_TIMEOUT
        ),
        log_debug=log_debug,
        log_file=log_file,
    )


# Global instance, created lazily
_config: Config | None = None


def get_config() -> Config:
    """Return the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from the environment (used by tests)."""
    global _config
    _config = load_config()
    return _config
