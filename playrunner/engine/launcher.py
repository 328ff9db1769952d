"""
playrunner/engine/launcher.py

Spawning the runner process.

``launch`` is a single blocking call: it starts the process, streams its
combined stdout/stderr (decoded as UTF-8, undecodable bytes replaced) to the
build log line by line, and returns the exit code once the process is gone.
An interrupt while waiting kills the child before propagating.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Protocol

from playrunner.engine.context import OutputCallback
from playrunner.errors import ErrorCode, LaunchError

logger = logging.getLogger(__name__)


class ProcessLauncher(Protocol):
    def launch(
        self,
        cmd: List[str],
        cwd: Path,
        env: Mapping[str, str],
        on_output: OutputCallback,
    ) -> int:
        ...


class SubprocessLauncher:
    """Runs the command as a child process of the current interpreter."""

    def __init__(self, inherit_environment: bool = False):
        # When False, ``env`` is the complete child environment.
        self.inherit_environment = inherit_environment

    def launch(self, cmd, cwd, env, on_output) -> int:
        child_env: Dict[str, str] = dict(os.environ) if self.inherit_environment else {}
        child_env.update(env)

        # Error handling block.
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(cwd),
                env=child_env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            # The caller owns the masked rendering; only the program is named here.
            raise LaunchError(
                ErrorCode.LAUNCH_FAILED,
                f"Unable to start {Path(cmd[0]).name}: {e.strerror or e}",
                details={"cwd": str(cwd)},
            ) from e

        try:
            if proc.stdout:
                for line in proc.stdout:
                    on_output(line.rstrip("\n"))
            return proc.wait()
        except BaseException:
            _terminate(proc)
            raise
        finally:
            if proc.stdout:
                proc.stdout.close()


def _terminate(proc: subprocess.Popen, grace_seconds: float = 5.0) -> None:
    if proc.poll() is not None:
        return
    logger.warning(f"Interrupted, terminating runner process {proc.pid}")
    proc.terminate()
    try:
        proc.wait(timeout=grace_seconds)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait()
