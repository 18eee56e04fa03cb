"""Job handle: one external command and its lifecycle.

job-dispatcher runtime module v0.1.0

This module provides:
- Synchronous spawn of ``[command, argument]`` with the child's stdio on DEVNULL
- Non-blocking status probe (``try_wait``)
- Cooperative wait-to-completion on the caller's event loop (``wait``)
- Graceful termination (SIGTERM -> timeout -> SIGKILL) and cancel-safe cleanup

Key design points:
- ``wait`` suspends through anyio on the caller's asyncio event loop, which
  is the only concurrency context it needs.
- The child is reaped at most once. The first observer of termination
  records the ExitStatus, drops the Popen handle and moves the job to FINISHED.
- Observation failures raise ``JobError`` subclasses. A non-zero exit code
  is a normal ExitStatus.
"""

from __future__ import annotations

import logging
import subprocess

import anyio

from ..config import get_config
from ..errors import (
    AlreadyFinishedError,
    AlreadyStartedError,
    NotStartedError,
    SpawnFailedError,
    WaitFailedError,
    WaitTimeoutError,
)
from .types import ExitStatus, JobSnapshot, JobState

__all__ = [
    "Job",
    "run_job",
]

logger = logging.getLogger(__name__)


class Job:
    """Handle for one external process.

    State machine: NOT_STARTED -> RUNNING -> FINISHED. ``start`` performs the
    first transition; ``try_wait``, ``wait`` and ``terminate`` perform the
    second once the child has actually exited.

    Example:
        job = Job("gio", "/tmp/old-report.txt")
        job.start()

        status = await job.wait()
        if not status.success:
            print(f"job failed: {status}")

    Attributes:
        command: Executable to invoke
        argument: Single argument passed to the executable
    """

    def __init__(
        self,
        command: str,
        argument: str,
        *,
        poll_interval: float | None = None,
        term_timeout: float | None = None,
        kill_timeout: float | None = None,
    ) -> None:
        """Create a job. Nothing is spawned and the command is not checked.

        Args:
            command: Executable to invoke
            argument: Argument passed to the executable
            poll_interval: Seconds between status checks in ``wait``
                (default from config)
            term_timeout: Seconds to wait after SIGTERM (default from config)
            kill_timeout: Seconds to wait after SIGKILL (default from config)
        """
        self._command = command
        self._argument = argument

        config = get_config()
        self._poll_interval = (
            poll_interval if poll_interval is not None else config.poll_interval
        )
        self._term_timeout = (
            term_timeout if term_timeout is not None else config.term_timeout
        )
        self._kill_timeout = (
            kill_timeout if kill_timeout is not None else config.kill_timeout
        )

        self._state = JobState.NOT_STARTED
        self._process: subprocess.Popen[bytes] | None = None
        self._pid: int | None = None
        self._exit_status: ExitStatus | None = None

    @property
    def command(self) -> str:
        return self._command

    @property
    def argument(self) -> str:
        return self._argument

    @property
    def state(self) -> JobState:
        return self._state

    @property
    def pid(self) -> int | None:
        """Pid of the child; kept after the child is reaped."""
        return self._pid

    @property
    def is_running(self) -> bool:
        """True between ``start`` and the first observed termination."""
        return self._state is JobState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state is JobState.FINISHED

    def start(self) -> None:
        """Spawn the child process and return without waiting for it.

        Raises:
            AlreadyStartedError: If the job already has or had a process
            SpawnFailedError: If the OS refuses to create the process
        """
        if self._state is not JobState.NOT_STARTED:
            raise AlreadyStartedError(
                f"job {self._command!r} is already {self._state} (pid={self._pid})"
            )

        argv = [self._command, self._argument]
        try:
            # Child I/O is not plumbed; DEVNULL keeps it off our stdio.
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Spawn failed argv={argv}: {e}")
            raise SpawnFailedError(self._command, str(e)) from e

        self._process = process
        self._pid = process.pid
        self._state = JobState.RUNNING
        logger.debug(f"Started job pid={process.pid} argv={argv}")

    def try_wait(self) -> ExitStatus | None:
        """Check once, without blocking, whether the child has exited.

        Returns:
            The ExitStatus if the child has exited, None if it is still running

        Raises:
            NotStartedError: If ``start`` was never called
            WaitFailedError: If the OS status check fails
        """
        if self._state is JobState.NOT_STARTED:
            raise NotStartedError(f"job {self._command!r} has not been started")
        if self._state is JobState.FINISHED:
            return self._exit_status

        returncode = self._poll()
        if returncode is None:
            return None
        return self._record(returncode)

    async def wait(self, timeout: float | None = None) -> ExitStatus:
        """Suspend the calling task until the child exits.

        Other tasks on the event loop keep running while this one waits.
        Cancelling the caller leaves the job RUNNING.

        Args:
            timeout: Optional bound in seconds

        Returns:
            The child's ExitStatus

        Raises:
            NotStartedError: If ``start`` was never called
            AlreadyFinishedError: If the child was already reaped
            WaitTimeoutError: If ``timeout`` elapsed; the job stays RUNNING
            WaitFailedError: If the OS status check fails
        """
        if self._state is JobState.NOT_STARTED:
            raise NotStartedError(f"job {self._command!r} has not been started")
        if self._state is JobState.FINISHED:
            raise AlreadyFinishedError(
                f"job {self._command!r} (pid={self._pid}) was already reaped "
                f"with {self._exit_status}"
            )

        try:
            with anyio.fail_after(timeout):
                return await self._wait_for_exit()
        except TimeoutError:
            logger.debug(f"Wait timed out after {timeout}s pid={self._pid}")
            raise WaitTimeoutError(timeout) from None

    def get_status(self) -> ExitStatus | None:
        """Return the recorded ExitStatus, or None if not yet available."""
        return self._exit_status

    async def terminate(self) -> ExitStatus | None:
        """Stop a running child and reap it.

        Termination strategy:
        1. Send SIGTERM (``terminate()`` on Windows)
        2. Wait up to term_timeout for the child to exit
        3. If still running, send SIGKILL
        4. Wait up to kill_timeout for the child to exit

        Returns:
            The recorded ExitStatus, or None if the child outlived SIGKILL

        Raises:
            NotStartedError: If ``start`` was never called
            WaitFailedError: If the OS status check fails
        """
        if self._state is JobState.NOT_STARTED:
            raise NotStartedError(f"job {self._command!r} has not been started")
        if self._state is JobState.FINISHED:
            return self._exit_status

        process = self._process
        assert process is not None
        pid = process.pid
        logger.debug(f"Terminating job pid={pid}")

        try:
            process.terminate()
        except ProcessLookupError:
            logger.debug(f"Job already exited pid={pid}")

        with anyio.move_on_after(self._term_timeout):
            status = await self._wait_for_exit()
            logger.debug(f"Job terminated gracefully pid={pid} status={status}")
            return status

        logger.debug(f"Force killing job pid={pid}")
        try:
            process.kill()
        except ProcessLookupError:
            logger.debug(f"Job already exited pid={pid}")

        with anyio.move_on_after(self._kill_timeout):
            status = await self._wait_for_exit()
            logger.debug(f"Job killed pid={pid} status={status}")
            return status

        logger.warning(f"Job did not exit after kill pid={pid}")
        return None

    async def aclose(self) -> None:
        """Terminate the child if it is still running, shielded from cancellation."""
        if self._state is not JobState.RUNNING:
            return
        with anyio.CancelScope(shield=True):
            await self.terminate()

    async def __aenter__(self) -> "Job":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def snapshot(self) -> JobSnapshot:
        """Describe the job as a serialisable model."""
        status = self._exit_status
        return JobSnapshot(
            command=self._command,
            argument=self._argument,
            state=self._state,
            pid=self._pid,
            exit_code=status.code if status else None,
            exit_signal=status.signal if status else None,
        )

    def __repr__(self) -> str:
        detail = f", status={self._exit_status}" if self._exit_status else ""
        return (
            f"Job(command={self._command!r}, "
            f"argument={self._argument!r}, "
            f"state={self._state}, "
            f"pid={self._pid}{detail})"
        )

    def _poll(self) -> int | None:
        """Single non-blocking OS check of the child."""
        assert self._process is not None
        try:
            return self._process.poll()
        except OSError as e:
            raise WaitFailedError(
                f"status check failed for pid={self._pid}: {e}"
            ) from e

    def _record(self, returncode: int) -> ExitStatus:
        """Record termination; the Popen handle is released here."""
        status = ExitStatus.from_returncode(returncode)
        self._exit_status = status
        self._process = None
        self._state = JobState.FINISHED
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Job finished status=%s job=%s", status, self.snapshot())
        return status

    async def _wait_for_exit(self) -> ExitStatus:
        while True:
            # Another observer may have reaped the child while we slept.
            if self._exit_status is not None:
                return self._exit_status
            returncode = self._poll()
            if returncode is not None:
                return self._record(returncode)
            await anyio.sleep(self._poll_interval)


async def run_job(
    command: str,
    argument: str,
    *,
    timeout: float | None = None,
) -> ExitStatus:
    """Start a job and wait for it.

    This is a convenience function for callers that only need the result.
    If the wait times out or is cancelled the child is terminated.

    Args:
        command: Executable to invoke
        argument: Argument passed to the executable
        timeout: Optional bound in seconds

    Returns:
        The child's ExitStatus

    Raises:
        SpawnFailedError: If the OS refuses to create the process
        WaitTimeoutError: If ``timeout`` elapsed before the child exited
    """
    async with Job(command, argument) as job:
        job.start()
        return await job.wait(timeout=timeout)
