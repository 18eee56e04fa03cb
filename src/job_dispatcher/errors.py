"""Job dispatcher exceptions.

Every failure to *observe* or *control* a job is raised as a ``JobError``
subclass. A child that runs and exits with a non-zero code is not an
error: it is reported through ``ExitStatus``.
"""

from __future__ import annotations

__all__ = [
    "JobError",
    "SpawnFailedError",
    "NotStartedError",
    "AlreadyStartedError",
    "AlreadyFinishedError",
    "WaitFailedError",
    "WaitTimeoutError",
]


class JobError(Exception):
    """Base exception for job lifecycle errors."""
    pass


class SpawnFailedError(JobError):
    """The OS refused to create the child process.

    Attributes:
        command: Executable that could not be started
        reason: Error message reported by the OS
    """

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"failed to spawn {command!r}: {reason}")


class NotStartedError(JobError):
    """The job was queried before ``start()`` was called."""
    pass


class AlreadyStartedError(JobError):
    """``start()`` was called on a job that already has (or had) a process."""
    pass


class AlreadyFinishedError(JobError):
    """``wait()`` was called on a job whose process was already reaped.

    Use ``get_status()`` to read the recorded exit status.
    """
    pass


class WaitFailedError(JobError):
    """The OS-level status check on the child failed."""
    pass


class WaitTimeoutError(JobError, TimeoutError):
    """A bounded wait elapsed while the child was still running.

    Attributes:
        timeout: The bound that elapsed, in seconds
    """

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"job still running after {timeout}s")
