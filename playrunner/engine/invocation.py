"""
playrunner/engine/invocation.py

One runner invocation for one build step.

Configure the instance through its attributes and toggle methods, then call
``execute()`` exactly once. The command line is assembled in a fixed order:

    [sshpass -p<secret>] <exe> [inventory] -f <forks> [-s [-U <user>]]
        [credential flags] [additional parameters]

Lifecycle:

    CONFIGURED -> RESOLVING -> RUNNING -> TORN_DOWN

Any error raised past CONFIGURED moves the invocation to FAILED.

Whatever way ``execute()`` leaves, the inventory handle is torn down and the
ephemeral private key file (if one was written) is deleted, each exactly once.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from playrunner.credentials.keyfile import create_ssh_key_file, delete_temp_file
from playrunner.credentials.models import Credential, PasswordCredential, PrivateKeyCredential
from playrunner.credentials.resolver import CredentialResolver
from playrunner.credentials.store import CredentialStore
from playrunner.engine.arguments import ArgumentVector, expand_env
from playrunner.engine.context import BuildContext
from playrunner.engine.inventory import InventoryHandle
from playrunner.engine.launcher import ProcessLauncher, SubprocessLauncher
from playrunner.errors import ConfigurationError, ErrorCode
from playrunner.toolkit.registry import InstallationRegistry, RunnerCommand, get_registry

logger = logging.getLogger(__name__)

_UNRESOLVED = object()


class InvocationState(str, Enum):
    CONFIGURED = "CONFIGURED"
    RESOLVING = "RESOLVING"
    RUNNING = "RUNNING"
    TORN_DOWN = "TORN_DOWN"
    FAILED = "FAILED"


class Invocation:
    """
    Base runner invocation.

    Subclasses pick the runner command and override ``build_command_line``
    to insert their own fragments; the relative order of the fragments
    defined here never changes.
    """

    command: RunnerCommand = RunnerCommand.ANSIBLE

    def __init__(
        self,
        context: BuildContext,
        installation: Optional[str] = None,
        *,
        registry: Optional[InstallationRegistry] = None,
        credential_store: Optional[CredentialStore] = None,
        launcher: Optional[ProcessLauncher] = None,
        key_dir: Optional[Path] = None,
    ):
        self.context = context
        self.env: Dict[str, str] = dict(context.environment)
        self.launcher: ProcessLauncher = launcher or SubprocessLauncher()
        self.resolver = CredentialResolver(credential_store)
        self.key_dir = key_dir

        # Child environment overlay, filled by the feature toggles.
        self.environment: Dict[str, str] = {}

        self.forks: int = 5
        self.sudo: bool = False
        self.sudo_user: Optional[str] = None
        self.credentials_id: Optional[str] = None
        self.additional_parameters: Optional[str] = None
        self.inventory: Optional[InventoryHandle] = None

        self.state = InvocationState.CONFIGURED
        self._credentials = _UNRESOLVED
        self._key_file: Optional[Path] = None

        self.exe: str = (registry or get_registry()).resolve_executable(installation, self.command, self.env)

    # -- feature toggles -------------------------------------------------

    def set_unbuffered_output(self, unbuffered_output: bool) -> "Invocation":
        if unbuffered_output:
            self.environment["PYTHONUNBUFFERED"] = "1"
        return self

    def set_colorized_output(self, colorized_output: bool) -> "Invocation":
        if colorized_output:
            self.environment["ANSIBLE_FORCE_COLOR"] = "true"
        return self

    def set_host_key_check(self, host_key_checking: bool) -> "Invocation":
        if not host_key_checking:
            self.environment["ANSIBLE_HOST_KEY_CHECKING"] = "False"
        return self

    # -- credentials -------------------------------------------------------

    def get_credentials(self) -> Optional[Credential]:
        """Resolve ``credentials_id`` on first use; later calls reuse the result."""
        if self._credentials is _UNRESOLVED:
            self._credentials = self.resolver.resolve(self.credentials_id, self.context)
        return self._credentials

    @property
    def key_file(self) -> Optional[Path]:
        return self._key_file

    # -- command line fragments ------------------------------------------

    def prepend_password_credentials(self, args: ArgumentVector) -> ArgumentVector:
        credentials = self.get_credentials()
        if isinstance(credentials, PasswordCredential):
            args.add("sshpass").add_masked("-p" + credentials.password.get_secret_value())
        return args

    def append_executable(self, args: ArgumentVector) -> ArgumentVector:
        return args.add(self.exe)

    def append_inventory(self, args: ArgumentVector) -> ArgumentVector:
        if self.inventory is None:
            raise ConfigurationError(
                ErrorCode.INVOCATION_INVENTORY_MISSING,
                "The inventory of hosts and groups is not defined. Check the job configuration.",
            )
        return self.inventory.add_argument(args, self.env, self.context.on_output)

    def append_forks(self, args: ArgumentVector) -> ArgumentVector:
        return args.add("-f").add(self.forks)

    def append_sudo(self, args: ArgumentVector) -> ArgumentVector:
        if self.sudo:
            args.add("-s")
            if self.sudo_user and self.sudo_user.strip():
                args.add("-U").add(expand_env(self.sudo_user, self.env))
        return args

    def append_credentials(self, args: ArgumentVector) -> ArgumentVector:
        credentials = self.get_credentials()
        if isinstance(credentials, PrivateKeyCredential):
            self._key_file = create_ssh_key_file(self._key_file, credentials, self.key_dir)
            args.add("--private-key").add(str(self._key_file))
            args.add("-u").add(credentials.username)
        elif isinstance(credentials, PasswordCredential):
            args.add("-u").add(credentials.username)
            args.add("-k")
        return args

    def append_additional_parameters(self, args: ArgumentVector) -> ArgumentVector:
        try:
            return args.add_tokenized(expand_env(self.additional_parameters, self.env))
        except ValueError as e:
            # The raw parameters may hold expanded secrets; only the parse error is reported.
            raise ConfigurationError(
                ErrorCode.INVOCATION_PARAMETERS_INVALID,
                f"Additional parameters cannot be parsed: {e}. Check the job configuration.",
            ) from None

    def build_command_line(self) -> ArgumentVector:
        args = ArgumentVector()
        self.prepend_password_credentials(args)
        self.append_executable(args)
        self.append_inventory(args)
        self.append_forks(args)
        self.append_sudo(args)
        self.append_credentials(args)
        self.append_additional_parameters(args)
        return args

    # -- execution -------------------------------------------------------

    def execute(self) -> bool:
        """
        Run the runner once. Returns True only when it exits with status 0.

        Resolution, configuration and launch errors propagate after teardown.
        """
        if self.state is not InvocationState.CONFIGURED:
            raise ConfigurationError(
                ErrorCode.INVOCATION_ALREADY_EXECUTED,
                f"Invocation already executed (state {self.state.value}); create a new one per build step",
            )

        self.state = InvocationState.RESOLVING
        # ExitStack unwinds last-in first-out: inventory teardown runs first.
        with ExitStack() as cleanup:
            cleanup.callback(self._delete_key_file)
            if self.inventory is not None:
                cleanup.callback(self._tear_down_inventory, self.inventory)
            try:
                args = self.build_command_line()
                self.state = InvocationState.RUNNING
                exit_code = self._launch(args)
            except BaseException:
                self.state = InvocationState.FAILED
                raise

        self.state = InvocationState.TORN_DOWN
        if exit_code != 0:
            logger.info(f"{self.command.value} exited with status {exit_code}")
        return exit_code == 0

    def _launch(self, args: ArgumentVector) -> int:
        rendered = args.render()
        logger.info(f"[{self.context.name}] Executing: {rendered}")
        self.context.on_output(f"$ {rendered}")

        env = dict(self.env)
        env.update(self.environment)
        return self.launcher.launch(args.to_list(), self.context.workspace, env, self.context.on_output)

    def _tear_down_inventory(self, inventory: InventoryHandle) -> None:
        try:
            inventory.tear_down(self.context.on_output)
        except Exception as e:
            logger.exception(f"[{self.context.name}] Inventory teardown failed")
            self.context.on_output(f"[WARNING] inventory teardown failed: {e}")

    def _delete_key_file(self) -> None:
        delete_temp_file(self._key_file, self.context.on_output)
        self._key_file = None
