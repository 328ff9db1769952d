"""
playrunner/toolkit/registry.py

Registered runner installations.

An installation is a named home directory holding the runner executables
(``ansible``, ``ansible-playbook``...). A blank home means "whatever is on
PATH". The registry is built once per process from configuration and then
handed to each invocation.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from playrunner.errors import ErrorCode, ResolutionError

logger = logging.getLogger(__name__)


class RunnerCommand(str, Enum):
    ANSIBLE = "ansible"
    ANSIBLE_PLAYBOOK = "ansible-playbook"

    @property
    def executable(self) -> str:
        return self.value


@dataclass(frozen=True)
class Installation:
    name: str
    home: str = ""

    def get_executable_path(self, command: RunnerCommand, env: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        Locate ``command`` for this installation.

        With a home directory, ``<home>/<exe>`` then ``<home>/bin/<exe>`` are
        tried. Without one, ``<exe>`` is looked up on the PATH of ``env``
        (or of the current process).
        """
        exe = command.executable
        if not self.home.strip():
            search_path = (env or {}).get("PATH") or os.environ.get("PATH")
            return shutil.which(exe, path=search_path)

        home = Path(self.home).expanduser()
        for candidate in (home / exe, home / "bin" / exe):
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return str(candidate)
        return None


class InstallationRegistry:
    """Ordered, read-only collection of installations."""

    def __init__(self, installations: Iterable[Installation] = ()):
        self._installations: Tuple[Installation, ...] = tuple(installations)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "InstallationRegistry":
        return cls(Installation(name=name, home=home) for name, home in pairs)

    def all_installations(self) -> List[Installation]:
        return list(self._installations)

    def get_installation(self, name: Optional[str] = None) -> Installation:
        """
        Pick an installation by name; ``None`` selects the first registered one.
        """
        if not self._installations:
            raise ResolutionError(
                ErrorCode.RESOLUTION_NO_INSTALLATIONS,
                "Ansible not found: no installation is registered",
            )
        if name is None:
            return self._installations[0]
        for installation in self._installations:
            if installation.name == name:
                return installation
        raise ResolutionError(
            ErrorCode.RESOLUTION_INSTALLATION_NOT_FOUND,
            f"Ansible not found: no installation named '{name}'",
            details={"known": [i.name for i in self._installations]},
        )

    def resolve_executable(
        self,
        name: Optional[str],
        command: RunnerCommand,
        env: Optional[Dict[str, str]] = None,
    ) -> str:
        installation = self.get_installation(name)
        exe = installation.get_executable_path(command, env)
        if exe is None:
            raise ResolutionError(
                ErrorCode.RESOLUTION_EXECUTABLE_NOT_FOUND,
                "Ansible executable not found, check your installation.",
                details={"installation": installation.name, "command": command.value},
            )
        logger.debug(f"Resolved {command.value} of installation '{installation.name}' to {exe}")
        return exe

    def __len__(self) -> int:
        return len(self._installations)


_registry: Optional[InstallationRegistry] = None


def get_registry() -> InstallationRegistry:
    """Process-wide registry, loaded from configuration on first use."""
    global _registry
    if _registry is None:
        from playrunner.config import get_config
        _registry = InstallationRegistry.from_pairs(get_config().installation.installations)
    return _registry


def set_registry(registry: Optional[InstallationRegistry]) -> None:
    global _registry
    _registry = registry
