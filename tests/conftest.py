"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
import shutil
import sys
from collections.abc import Callable
from pathlib import Path

import anyio
import pytest

PROJECT_ROOT = Path(__file__).parent.parent
FIXTURES_DIR = PROJECT_ROOT / "tests" / "fixtures"

# Add src to the Python path (development checkout)
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from job_dispatcher.config import reload_config  # noqa: E402
from job_dispatcher.runtime import Job  # noqa: E402

IS_WINDOWS = sys.platform == "win32"

# Path to the fake job script
FAKE_JOB_PATH = FIXTURES_DIR / "fake_job.py"

JD_ENV_VARS = (
    "JD_POLL_INTERVAL",
    "JD_TERM_TIMEOUT",
    "JD_KILL_TIMEOUT",
    "JD_LOG_DEBUG",
)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default configuration."""
    for name in JD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    monkeypatch.undo()
    reload_config()


@pytest.fixture
def make_fake_job(tmp_path: Path) -> Callable[..., Job]:
    """Factory for Jobs that run ``fixtures/fake_job.py``.

    A Job passes exactly one argument, so each job gets its own copy of the
    script plus a sibling JSON settings file.

    Args (of the returned factory):
        duration: Seconds the child sleeps before exiting
        exit_code: Exit code of the child
        ignore_term: Child ignores SIGTERM
        ready_file: Path the child touches once its signal handling is set up
        **job_kwargs: Passed through to Job
    """
    counter = 0

    def factory(
        duration: float = 0.0,
        exit_code: int = 0,
        ignore_term: bool = False,
        ready_file: Path | None = None,
        **job_kwargs,
    ) -> Job:
        nonlocal counter
        counter += 1
        script = tmp_path / f"fake_job_{counter}.py"
        shutil.copyfile(FAKE_JOB_PATH, script)
        settings = {
            "duration": float(duration),
            "exit_code": int(exit_code),
            "ignore_term": bool(ignore_term),
            "ready_file": str(ready_file) if ready_file else None,
        }
        script.with_suffix(".json").write_text(json.dumps(settings), encoding="utf-8")
        job_kwargs.setdefault("poll_interval", 0.01)
        return Job(sys.executable, str(script), **job_kwargs)

    return factory


async def wait_for_file(path: Path, timeout: float = 10.0) -> None:
    """Poll until ``path`` exists."""
    with anyio.fail_after(timeout):
        while not path.exists():
            await anyio.sleep(0.01)
