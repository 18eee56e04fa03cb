"""Logging setup for programs that embed job_dispatcher.

The library itself only creates module loggers; call ``configure_logging``
from the host program's entry point to get output.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping

from .config import Config, get_config

__all__ = ["JsonSerializingFormatter", "configure_logging"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonSerializingFormatter(logging.Formatter):
    """Formatter that renders object log args as JSON.

    Pydantic models (such as ``JobSnapshot``) go through ``model_dump``,
    dicts and plain objects through ``json.dumps``.
    """

    def format(self, record: logging.LogRecord) -> str:
        # LogRecord unwraps a lone mapping arg; "%s" still expects one value
        if isinstance(record.args, Mapping) and "%(" not in str(record.msg):
            try:
                record.args = (
                    json.dumps(dict(record.args), ensure_ascii=False, default=str),
                )
            except (TypeError, ValueError):
                record.args = (record.args,)
        if record.args and isinstance(record.args, tuple):
            new_args = []
            for arg in record.args:
                try:
                    if hasattr(arg, "model_dump"):
                        new_args.append(
                            json.dumps(arg.model_dump(mode="json"), ensure_ascii=False)
                        )
                    elif isinstance(arg, dict):
                        new_args.append(json.dumps(arg, ensure_ascii=False, default=str))
                    elif hasattr(arg, "__dict__") and not isinstance(
                        arg, (str, int, float, bool, type(None))
                    ):
                        new_args.append(
                            json.dumps(vars(arg), ensure_ascii=False, default=str)
                        )
                    else:
                        new_args.append(arg)
                except (TypeError, ValueError):
                    new_args.append(arg)
            record.args = tuple(new_args)
        return super().format(record)


def configure_logging(config: Config | None = None) -> list[logging.Handler]:
    """Configure logging for the job_dispatcher namespace.

    - default: stderr at INFO
    - JD_LOG_DEBUG: temp file at DEBUG, object args serialised as JSON

    Third-party loggers stay at WARNING.

    Args:
        config: Configuration to use (default: global config)

    Returns:
        The handlers that were created
    """
    config = config or get_config()
    log_handlers: list[logging.Handler] = []

    if config.log_debug and config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(JsonSerializingFormatter(LOG_FORMAT))
        log_handlers.append(file_handler)
        log_level = logging.DEBUG
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(stderr_handler)
        log_level = logging.INFO

    logging.basicConfig(
        level=logging.WARNING,
        handlers=log_handlers,
    )
    logging.getLogger("job_dispatcher").setLevel(log_level)

    return log_handlers
