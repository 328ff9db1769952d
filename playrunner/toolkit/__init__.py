from playrunner.toolkit.registry import (
    Installation,
    InstallationRegistry,
    RunnerCommand,
    get_registry,
    set_registry,
)

__all__ = ["Installation", "InstallationRegistry", "RunnerCommand", "get_registry", "set_registry"]
