"""
playrunner/engine/inventory.py

Inventory handles: how an invocation tells the runner which hosts to target.

The invocation calls ``add_argument`` once while building the command line
and ``tear_down`` once when the invocation is finished, whatever the outcome.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional

from playrunner.credentials.keyfile import delete_temp_file
from playrunner.engine.arguments import ArgumentVector, expand_env
from playrunner.engine.context import OutputCallback

logger = logging.getLogger(__name__)


class InventoryHandle(ABC):

    @abstractmethod
    def add_argument(
        self,
        args: ArgumentVector,
        env: Mapping[str, str],
        on_output: OutputCallback,
    ) -> ArgumentVector:
        ...

    def tear_down(self, on_output: OutputCallback) -> None:
        """Release whatever ``add_argument`` created. Default: nothing."""


class InventoryPath(InventoryHandle):
    """An inventory file or dynamic inventory script already on disk."""

    def __init__(self, path: str):
        self.path = path

    def add_argument(self, args, env, on_output):
        return args.add("-i").add(expand_env(self.path, env))

    def __repr__(self) -> str:
        return f"InventoryPath({self.path!r})"


class InventoryContent(InventoryHandle):
    """
    Inventory given inline in the job configuration.

    The (env-expanded) content is written to a temp file for the duration of
    the invocation. A dynamic inventory is an executable script, so the file
    is made executable for its owner.
    """

    def __init__(self, content: str, dynamic: bool = False, directory: Optional[Path] = None):
        self.content = content
        self.dynamic = dynamic
        self.directory = directory
        self._file: Optional[Path] = None

    def add_argument(self, args, env, on_output):
        fd, name = tempfile.mkstemp(
            prefix="inventory",
            suffix=".ini",
            dir=str(self.directory) if self.directory else None,
        )
        self._file = Path(name)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(expand_env(self.content, env))
        mode = stat.S_IRUSR | stat.S_IXUSR if self.dynamic else stat.S_IRUSR
        os.chmod(self._file, mode)
        logger.debug(f"Wrote inline inventory to {self._file}")
        return args.add("-i").add(str(self._file))

    def tear_down(self, on_output):
        delete_temp_file(self._file, on_output)
        self._file = None

    @property
    def file(self) -> Optional[Path]:
        return self._file


class InventoryDoNotSpecify(InventoryHandle):
    """Let the runner fall back to its own configured inventory."""

    def add_argument(self, args, env, on_output):
        return args
