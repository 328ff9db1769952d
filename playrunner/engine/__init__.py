from playrunner.engine.arguments import MASK, ArgToken, ArgumentVector, expand_env
from playrunner.engine.commands import AdHocInvocation, ExtraVar, PlaybookInvocation
from playrunner.engine.context import BuildContext
from playrunner.engine.inventory import (
    InventoryContent,
    InventoryDoNotSpecify,
    InventoryHandle,
    InventoryPath,
)
from playrunner.engine.invocation import Invocation, InvocationState
from playrunner.engine.launcher import ProcessLauncher, SubprocessLauncher

__all__ = [
    "MASK",
    "ArgToken",
    "ArgumentVector",
    "expand_env",
    "AdHocInvocation",
    "ExtraVar",
    "PlaybookInvocation",
    "BuildContext",
    "InventoryContent",
    "InventoryDoNotSpecify",
    "InventoryHandle",
    "InventoryPath",
    "Invocation",
    "InvocationState",
    "ProcessLauncher",
    "SubprocessLauncher",
]
