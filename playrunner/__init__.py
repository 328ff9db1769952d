"""playrunner - assemble and run one Ansible invocation per build step."""

from playrunner.engine import (
    AdHocInvocation,
    BuildContext,
    InventoryContent,
    InventoryDoNotSpecify,
    InventoryPath,
    Invocation,
    PlaybookInvocation,
)
from playrunner.errors import ErrorCode, PlayrunnerError

__version__ = "0.1.0"

__all__ = [
    "AdHocInvocation",
    "BuildContext",
    "InventoryContent",
    "InventoryDoNotSpecify",
    "InventoryPath",
    "Invocation",
    "PlaybookInvocation",
    "ErrorCode",
    "PlayrunnerError",
]
