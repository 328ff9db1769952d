"""Pytest configuration and shared fakes for playrunner."""
from pathlib import Path

import pytest

from playrunner.config import set_config
from playrunner.engine.context import BuildContext
from playrunner.engine.inventory import InventoryHandle
from playrunner.toolkit.registry import Installation, InstallationRegistry, set_registry

FAKE_RUNNER = "#!/bin/sh\necho \"$@\"\nexit 0\n"


class RecordingLauncher:
    """Stands in for the process launcher; records every launch."""

    def __init__(self, exit_code=0, error=None, on_launch=None):
        self.exit_code = exit_code
        self.error = error
        self.on_launch = on_launch
        self.calls = []

    def launch(self, cmd, cwd, env, on_output):
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": dict(env)})
        if self.on_launch:
            self.on_launch(list(cmd))
        if self.error is not None:
            raise self.error
        return self.exit_code

    @property
    def last_cmd(self):
        return self.calls[-1]["cmd"]


class RecordingInventory(InventoryHandle):
    def __init__(self, fail_add=False, fail_teardown=False):
        self.fail_add = fail_add
        self.fail_teardown = fail_teardown
        self.add_calls = 0
        self.teardown_calls = 0

    def add_argument(self, args, env, on_output):
        self.add_calls += 1
        if self.fail_add:
            raise RuntimeError("inventory script crashed")
        return args.add("-i").add("hosts.ini")

    def tear_down(self, on_output):
        self.teardown_calls += 1
        if self.fail_teardown:
            raise RuntimeError("inventory cleanup crashed")


@pytest.fixture(autouse=True)
def _reset_process_state():
    set_config(None)
    set_registry(None)
    yield
    set_config(None)
    set_registry(None)


@pytest.fixture
def runner_home(tmp_path) -> Path:
    home = tmp_path / "ansible"
    (home / "bin").mkdir(parents=True)
    for exe in ("ansible", "ansible-playbook"):
        script = home / "bin" / exe
        script.write_text(FAKE_RUNNER)
        script.chmod(0o755)
    return home


@pytest.fixture
def registry(runner_home) -> InstallationRegistry:
    return InstallationRegistry([Installation("default", str(runner_home))])


@pytest.fixture
def key_dir(tmp_path) -> Path:
    path = tmp_path / "keys"
    path.mkdir()
    return path


@pytest.fixture
def output():
    return []


@pytest.fixture
def context(tmp_path, output) -> BuildContext:
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return BuildContext(
        workspace=workspace,
        environment={"PATH": "/usr/bin:/bin", "EXTRA": "foo", "TARGET_USER": "deploy"},
        on_output=output.append,
        name="job#1",
    )


@pytest.fixture
def launcher_factory():
    return RecordingLauncher


@pytest.fixture
def inventory_factory():
    return RecordingInventory
