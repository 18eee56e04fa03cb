"""Job dispatcher - launch external commands and track their lifecycle.

Environment variables:
    JD_POLL_INTERVAL: Seconds between status checks while waiting (default 0.05)
    JD_TERM_TIMEOUT: Seconds to wait after SIGTERM (default 2.0)
    JD_KILL_TIMEOUT: Seconds to wait after SIGKILL (default 1.0)
    JD_LOG_DEBUG: Debug logging to a temp file (default false)

Logging is configured by the host program via ``configure_logging()``.

Usage:
    job = Job("gio", "/tmp/old-report.txt")
    job.start()
    status = await job.wait()
"""

__version__ = "0.1.0"

from .errors import (
    AlreadyFinishedError,
    AlreadyStartedError,
    JobError,
    NotStartedError,
    SpawnFailedError,
    WaitFailedError,
    WaitTimeoutError,
)
from .logging_setup import configure_logging
from .runtime import ExitStatus, Job, JobSnapshot, JobState, run_job

__all__ = [
    "__version__",
    "AlreadyFinishedError",
    "AlreadyStartedError",
    "ExitStatus",
    "Job",
    "JobError",
    "JobSnapshot",
    "JobState",
    "NotStartedError",
    "SpawnFailedError",
    "WaitFailedError",
    "WaitTimeoutError",
    "configure_logging",
    "run_job",
]
