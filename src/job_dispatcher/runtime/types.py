"""Job state and exit status types.

job-dispatcher runtime module v0.1.0

- JobState: lifecycle position (not_started -> running -> finished)
- ExitStatus: terminal outcome of a child (exit code or terminating signal)
- JobSnapshot: serialisable description of a job, used in logs
"""

from __future__ import annotations

import signal as _signal
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

__all__ = [
    "JobState",
    "ExitStatus",
    "JobSnapshot",
]


class JobState(str, Enum):
    """Lifecycle state of a job.

    - NOT_STARTED: created, no process spawned yet
    - RUNNING: process spawned, termination not yet observed
    - FINISHED: process reaped, exit status recorded (terminal)
    """

    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExitStatus:
    """Terminal outcome of a child process.

    Exactly one of ``code`` and ``signal`` is set.

    Attributes:
        code: Exit code when the process exited normally
        signal: Signal number when the process was terminated by a signal
    """

    code: int | None = None
    signal: int | None = None

    def __post_init__(self) -> None:
        if (self.code is None) == (self.signal is None):
            raise ValueError("ExitStatus needs exactly one of code or signal")

    @classmethod
    def from_returncode(cls, returncode: int) -> "ExitStatus":
        """Build from ``Popen.returncode`` (negative means killed by signal -N)."""
        if returncode < 0:
            return cls(signal=-returncode)
        return cls(code=returncode)

    @property
    def success(self) -> bool:
        """True when the process exited normally with code 0."""
        return self.code == 0

    @property
    def abnormal(self) -> bool:
        """True when the process did not exit with a code."""
        return self.code is None

    @property
    def signal_name(self) -> str | None:
        """Name of the terminating signal, if known (e.g. ``SIGKILL``)."""
        if self.signal is None:
            return None
        try:
            return _signal.Signals(self.signal).name
        except ValueError:
            return None

    def __str__(self) -> str:
        if self.signal is not None:
            return f"Signaled({self.signal})"
        if self.code == 0:
            return "Exit(0)"
        return f"Error({self.code})"


class JobSnapshot(BaseModel):
    """Point-in-time description of a job.

    Attributes:
        command: Executable of the job
        argument: Argument passed to the executable
        state: Lifecycle state at snapshot time
        pid: Child pid, if the job was started
        exit_code: Recorded exit code, if finished normally
        exit_signal: Recorded terminating signal, if finished abnormally
    """

    model_config = ConfigDict(frozen=True)

    command: str
    argument: str
    state: JobState
    pid: int | None = None
    exit_code: int | None = None
    exit_signal: int | None = None
