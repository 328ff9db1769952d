"""
playrunner/engine/commands.py

Concrete invocations: ``ansible`` ad-hoc commands and ``ansible-playbook``.

Both slot their own fragments around the base ones without changing the
base order (executable, inventory, forks, escalation, credentials,
additional parameters).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from playrunner.engine.arguments import ArgumentVector, expand_env
from playrunner.engine.invocation import Invocation
from playrunner.toolkit.registry import RunnerCommand


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


class AdHocInvocation(Invocation):
    """
    ``ansible <host-pattern> -i ... -m <module> -a <args> ...``
    """

    command = RunnerCommand.ANSIBLE

    def __init__(self, context, installation=None, **kwargs):
        super().__init__(context, installation, **kwargs)
        self.host_pattern: str = "all"
        self.module: Optional[str] = None
        self.module_command: Optional[str] = None

    def append_host_pattern(self, args: ArgumentVector) -> ArgumentVector:
        return args.add(expand_env(self.host_pattern, self.env))

    def append_module(self, args: ArgumentVector) -> ArgumentVector:
        if not _is_blank(self.module):
            args.add("-m").add(self.module)
        return args

    def append_module_command(self, args: ArgumentVector) -> ArgumentVector:
        if not _is_blank(self.module_command):
            args.add("-a").add(expand_env(self.module_command, self.env))
        return args

    def build_command_line(self) -> ArgumentVector:
        args = ArgumentVector()
        self.prepend_password_credentials(args)
        self.append_executable(args)
        self.append_host_pattern(args)
        self.append_inventory(args)
        self.append_module(args)
        self.append_module_command(args)
        self.append_forks(args)
        self.append_sudo(args)
        self.append_credentials(args)
        self.append_additional_parameters(args)
        return args


@dataclass(frozen=True)
class ExtraVar:
    key: str
    value: str
    hidden: bool = False


class PlaybookInvocation(Invocation):
    """
    ``ansible-playbook <playbook> -i ... [-l] [-t] [--skip-tags] [--start-at-task] ...``

    Hidden extra vars are passed as masked tokens so their values never show
    up in the build log.
    """

    command = RunnerCommand.ANSIBLE_PLAYBOOK

    def __init__(self, context, playbook: str, installation=None, **kwargs):
        super().__init__(context, installation, **kwargs)
        self.playbook = playbook
        self.limit: Optional[str] = None
        self.tags: Optional[str] = None
        self.skipped_tags: Optional[str] = None
        self.start_at_task: Optional[str] = None
        self.extra_vars: List[ExtraVar] = []

    def add_extra_var(self, key: str, value: str, hidden: bool = False) -> "PlaybookInvocation":
        self.extra_vars.append(ExtraVar(key, value, hidden))
        return self

    def append_playbook(self, args: ArgumentVector) -> ArgumentVector:
        return args.add(expand_env(self.playbook, self.env))

    def _append_option(self, args: ArgumentVector, flag: str, value: Optional[str]) -> ArgumentVector:
        if not _is_blank(value):
            args.add(flag).add(expand_env(value, self.env))
        return args

    def append_limit(self, args: ArgumentVector) -> ArgumentVector:
        return self._append_option(args, "-l", self.limit)

    def append_tags(self, args: ArgumentVector) -> ArgumentVector:
        return self._append_option(args, "-t", self.tags)

    def append_skipped_tags(self, args: ArgumentVector) -> ArgumentVector:
        return self._append_option(args, "--skip-tags", self.skipped_tags)

    def append_start_task(self, args: ArgumentVector) -> ArgumentVector:
        return self._append_option(args, "--start-at-task", self.start_at_task)

    def append_extra_vars(self, args: ArgumentVector) -> ArgumentVector:
        for var in self.extra_vars:
            args.add("-e")
            args.add_key_value(var.key, expand_env(var.value, self.env), masked=var.hidden)
        return args

    def build_command_line(self) -> ArgumentVector:
        args = ArgumentVector()
        self.prepend_password_credentials(args)
        self.append_executable(args)
        self.append_playbook(args)
        self.append_inventory(args)
        self.append_limit(args)
        self.append_tags(args)
        self.append_skipped_tags(args)
        self.append_start_task(args)
        self.append_forks(args)
        self.append_sudo(args)
        self.append_credentials(args)
        self.append_extra_vars(args)
        self.append_additional_parameters(args)
        return args
