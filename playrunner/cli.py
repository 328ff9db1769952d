"""
playrunner CLI: run one ansible / ansible-playbook invocation from the shell.

Usage examples:
    python -m playrunner playbook site.yml -i hosts.ini --forks 10 --sudo
    python -m playrunner adhoc webservers -i hosts.ini -m ping --credentials deploy-key
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from playrunner.config import PlayrunnerConfig, get_config, setup_logging
from playrunner.credentials.store import FileCredentialStore
from playrunner.engine.commands import AdHocInvocation, PlaybookInvocation
from playrunner.engine.context import BuildContext
from playrunner.engine.inventory import InventoryContent, InventoryDoNotSpecify, InventoryPath
from playrunner.engine.invocation import Invocation
from playrunner.engine.launcher import ProcessLauncher
from playrunner.errors import PlayrunnerError
from playrunner.toolkit.registry import InstallationRegistry, get_registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNNER_FAILED = 1
EXIT_ERROR = 2


def _print_line(line: str) -> None:
    print(line, flush=True)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    inventory = parser.add_mutually_exclusive_group()
    inventory.add_argument("-i", "--inventory", help="Inventory file or dynamic inventory script")
    inventory.add_argument("--inventory-content", help="Inline inventory content")
    inventory.add_argument("--no-inventory", action="store_true", help="Use the runner's default inventory")
    parser.add_argument("--dynamic-inventory", action="store_true",
                        help="Inline inventory content is an executable script")
    parser.add_argument("--installation", help="Registered installation name")
    parser.add_argument("--credentials", help="Credential id in the credentials file")
    parser.add_argument("-f", "--forks", type=int, default=5)
    parser.add_argument("--sudo", action="store_true", help="Escalate privileges on the targets")
    parser.add_argument("--sudo-user", help="User to escalate to")
    parser.add_argument("--additional", help="Extra runner parameters ($VARS are expanded)")
    parser.add_argument("--unbuffered", action="store_true", help="Disable runner output buffering")
    parser.add_argument("--color", action="store_true", help="Force colored runner output")
    parser.add_argument("--no-host-key-check", action="store_true", help="Skip SSH host key verification")
    parser.add_argument("--workspace", type=Path, default=Path.cwd())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="playrunner", description="Run Ansible for a build step")
    subparsers = parser.add_subparsers(dest="command", required=True)

    playbook = subparsers.add_parser("playbook", help="Run ansible-playbook")
    playbook.add_argument("playbook", help="Playbook path")
    playbook.add_argument("-l", "--limit")
    playbook.add_argument("-t", "--tags")
    playbook.add_argument("--skip-tags")
    playbook.add_argument("--start-at-task")
    playbook.add_argument("-e", "--extra-var", action="append", default=[], metavar="KEY=VALUE")
    playbook.add_argument("--hidden-var", action="append", default=[], metavar="KEY=VALUE",
                          help="Extra var whose value is masked in logs")
    _add_common_arguments(playbook)

    adhoc = subparsers.add_parser("adhoc", help="Run an ansible ad-hoc command")
    adhoc.add_argument("host_pattern", help="Host pattern, e.g. 'webservers'")
    adhoc.add_argument("-m", "--module")
    adhoc.add_argument("-a", "--args", dest="module_command")
    _add_common_arguments(adhoc)

    return parser


def _split_var(raw: str) -> tuple:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError("extra vars must be given as KEY=VALUE")
    return key, value


def create_invocation(
    args: argparse.Namespace,
    config: PlayrunnerConfig,
    registry: InstallationRegistry,
    launcher: Optional[ProcessLauncher] = None,
) -> Invocation:
    context = BuildContext(workspace=args.workspace, on_output=_print_line, name=args.command)
    store = None
    if config.credentials.credentials_file is not None:
        store = FileCredentialStore(config.credentials.credentials_file)

    options = dict(
        registry=registry,
        credential_store=store,
        launcher=launcher,
        key_dir=config.credentials.key_dir,
    )
    installation = args.installation or config.installation.default_installation

    if args.command == "playbook":
        invocation = PlaybookInvocation(context, args.playbook, installation, **options)
        invocation.limit = args.limit
        invocation.tags = args.tags
        invocation.skipped_tags = args.skip_tags
        invocation.start_at_task = args.start_at_task
        for raw in args.extra_var:
            invocation.add_extra_var(*_split_var(raw))
        for raw in args.hidden_var:
            invocation.add_extra_var(*_split_var(raw), hidden=True)
    else:
        invocation = AdHocInvocation(context, installation, **options)
        invocation.host_pattern = args.host_pattern
        invocation.module = args.module
        invocation.module_command = args.module_command

    if args.inventory:
        invocation.inventory = InventoryPath(args.inventory)
    elif args.inventory_content:
        invocation.inventory = InventoryContent(args.inventory_content, dynamic=args.dynamic_inventory)
    elif args.no_inventory:
        invocation.inventory = InventoryDoNotSpecify()

    invocation.forks = args.forks
    invocation.sudo = args.sudo
    invocation.sudo_user = args.sudo_user
    invocation.credentials_id = args.credentials
    invocation.additional_parameters = args.additional
    invocation.set_unbuffered_output(args.unbuffered)
    invocation.set_colorized_output(args.color)
    invocation.set_host_key_check(not args.no_host_key_check)
    return invocation


def main(
    argv: Optional[List[str]] = None,
    registry: Optional[InstallationRegistry] = None,
    launcher: Optional[ProcessLauncher] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = get_config()
    setup_logging(config)

    try:
        invocation = create_invocation(args, config, registry or get_registry(), launcher)
        ok = invocation.execute()
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except PlayrunnerError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK if ok else EXIT_RUNNER_FAILED


if __name__ == "__main__":
    sys.exit(main())
