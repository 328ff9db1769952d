"""Unit tests for the ad-hoc and playbook invocations."""
import pytest

from playrunner.credentials.models import PasswordCredential
from playrunner.credentials.store import InMemoryCredentialStore
from playrunner.engine.arguments import MASK
from playrunner.engine.commands import AdHocInvocation, PlaybookInvocation
from playrunner.engine.inventory import InventoryPath


@pytest.fixture
def store():
    return InMemoryCredentialStore([PasswordCredential(id="pw", username="alice", password="s3cr3t")])


class TestAdHocInvocation:

    def test_command_line(self, context, registry, runner_home, launcher_factory):
        invocation = AdHocInvocation(context, registry=registry, launcher=launcher_factory())
        invocation.host_pattern = "web-$EXTRA"
        invocation.inventory = InventoryPath("hosts.ini")
        invocation.module = "shell"
        invocation.module_command = "uptime --since $EXTRA"
        invocation.forks = 2
        invocation.sudo = True

        cmd = invocation.build_command_line().to_list()

        assert cmd == [
            str(runner_home / "bin" / "ansible"), "web-foo",
            "-i", "hosts.ini",
            "-m", "shell",
            "-a", "uptime --since foo",
            "-f", "2",
            "-s",
        ]

    def test_blank_module_is_omitted(self, context, registry, launcher_factory):
        invocation = AdHocInvocation(context, registry=registry, launcher=launcher_factory())
        invocation.inventory = InventoryPath("hosts.ini")
        invocation.module = " "

        cmd = invocation.build_command_line().to_list()

        assert "-m" not in cmd and "-a" not in cmd
        assert cmd[1] == "all"

    def test_runs_ansible_executable(self, context, registry, runner_home, launcher_factory):
        launcher = launcher_factory()
        invocation = AdHocInvocation(context, registry=registry, launcher=launcher)
        invocation.inventory = InventoryPath("hosts.ini")

        assert invocation.execute() is True
        assert launcher.last_cmd[0] == str(runner_home / "bin" / "ansible")


class TestPlaybookInvocation:

    def test_command_line_order(self, context, registry, store, runner_home, launcher_factory):
        invocation = PlaybookInvocation(context, "site-$EXTRA.yml", registry=registry,
                                        credential_store=store, launcher=launcher_factory())
        invocation.inventory = InventoryPath("hosts.ini")
        invocation.limit = "webservers"
        invocation.tags = "deploy"
        invocation.skipped_tags = "slow"
        invocation.start_at_task = "Restart nginx"
        invocation.forks = 3
        invocation.sudo = True
        invocation.sudo_user = "root"
        invocation.credentials_id = "pw"
        invocation.add_extra_var("version", "$EXTRA")
        invocation.additional_parameters = "--diff"

        cmd = invocation.build_command_line().to_list()

        assert cmd == [
            "sshpass", "-ps3cr3t",
            str(runner_home / "bin" / "ansible-playbook"), "site-foo.yml",
            "-i", "hosts.ini",
            "-l", "webservers",
            "-t", "deploy",
            "--skip-tags", "slow",
            "--start-at-task", "Restart nginx",
            "-f", "3",
            "-s", "-U", "root",
            "-u", "alice", "-k",
            "-e", "version=foo",
            "--diff",
        ]

    def test_blank_options_are_omitted(self, context, registry, launcher_factory):
        invocation = PlaybookInvocation(context, "site.yml", registry=registry, launcher=launcher_factory())
        invocation.inventory = InventoryPath("hosts.ini")
        invocation.limit = ""
        invocation.tags = "  "

        cmd = invocation.build_command_line().to_list()

        assert cmd[1:] == ["site.yml", "-i", "hosts.ini", "-f", "5"]

    def test_hidden_extra_vars_are_masked(self, context, registry, launcher_factory, output):
        launcher = launcher_factory()
        invocation = PlaybookInvocation(context, "site.yml", registry=registry, launcher=launcher)
        invocation.inventory = InventoryPath("hosts.ini")
        invocation.add_extra_var("env", "prod").add_extra_var("db_password", "hunter2", hidden=True)

        assert invocation.execute() is True

        assert "db_password=hunter2" in launcher.last_cmd
        rendered = "\n".join(output)
        assert "env=prod" in rendered
        assert MASK in rendered
        assert "hunter2" not in rendered
