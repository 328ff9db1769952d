"""
playrunner/engine/context.py

The build step an invocation runs for: its workspace, the environment
snapshot taken when it started, and the build log callback.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], None]


def log_output(line: str) -> None:
    logger.info(line)


@dataclass
class BuildContext:
    """
    What an invocation knows about the build step running it.

    ``environment`` is a snapshot taken when the step starts; it is the base
    environment of the runner process and the source for ``$VAR`` expansion.
    """

    workspace: Path
    environment: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    on_output: OutputCallback = log_output
    name: str = "build"

    @classmethod
    def from_cwd(cls, on_output: Optional[OutputCallback] = None, name: str = "build") -> "BuildContext":
        return cls(
            workspace=Path.cwd(),
            environment=dict(os.environ),
            on_output=on_output or log_output,
            name=name,
        )
