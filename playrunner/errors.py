"""
playrunner/errors.py

Structured error taxonomy for playrunner.

ERROR CODE FORMAT:
- INVOCATION_XXX: invocation lifecycle errors
- RESOLUTION_XXX: installation / executable lookup errors
- CREDENTIAL_XXX: credential store and key material errors
- LAUNCH_XXX: process launch errors
- CONFIG_XXX: configuration errors

USAGE:
  from playrunner.errors import ConfigurationError, ErrorCode

  raise ConfigurationError(
      ErrorCode.INVOCATION_INVENTORY_MISSING,
      "The inventory of hosts and groups is not defined.",
  )

Messages and details must never carry unmasked secret values.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    # Invocation Errors
    INVOCATION_INVENTORY_MISSING = "INVOCATION_001"
    INVOCATION_ALREADY_EXECUTED = "INVOCATION_002"
    INVOCATION_PARAMETERS_INVALID = "INVOCATION_003"

    # Resolution Errors
    RESOLUTION_NO_INSTALLATIONS = "RESOLUTION_001"
    RESOLUTION_INSTALLATION_NOT_FOUND = "RESOLUTION_002"
    RESOLUTION_EXECUTABLE_NOT_FOUND = "RESOLUTION_003"

    # Credential Errors
    CREDENTIAL_KEY_FILE_FAILED = "CREDENTIAL_001"
    CREDENTIAL_STORE_INVALID = "CREDENTIAL_002"

    # Launch Errors
    LAUNCH_FAILED = "LAUNCH_001"

    # Config Errors
    CONFIG_INVALID = "CONFIG_001"
    CONFIG_FILE_NOT_FOUND = "CONFIG_002"


class PlayrunnerError(Exception):
    """
    Base exception class for playrunner with structured error information.

    Attributes:
        code: ErrorCode enum value (e.g., "RESOLUTION_001")
        message: Human-readable error message
        details: Optional dictionary with additional context
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class InvocationError(PlayrunnerError):
    """Raised by an invocation for configuration or resolution failures."""


class ResolutionError(InvocationError):
    """No installation or no runner executable could be resolved."""


class ConfigurationError(InvocationError):
    """The invocation is not configured well enough to run."""


class CredentialMaterializationError(PlayrunnerError):
    """Private key material could not be written to disk."""


class LaunchError(PlayrunnerError):
    """The runner process could not be started."""


__all__ = [
    "ErrorCode",
    "PlayrunnerError",
    "InvocationError",
    "ResolutionError",
    "ConfigurationError",
    "CredentialMaterializationError",
    "LaunchError",
]
