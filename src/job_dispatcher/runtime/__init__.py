"""Runtime module for external job lifecycle management.

This module provides the Job handle, which spawns one external command
and tracks it through not_started -> running -> finished.
"""

from __future__ import annotations

from .job import Job, run_job
from .types import ExitStatus, JobSnapshot, JobState

__all__ = [
    "ExitStatus",
    "Job",
    "JobSnapshot",
    "JobState",
    "run_job",
]
