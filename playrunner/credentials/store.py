"""
playrunner/credentials/store.py

Credential stores consulted by the resolver.

A store is a pure, capability-typed lookup: ``find_by_id`` returns the record
only when it is an instance of the requested capability, otherwise ``None``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Protocol, Type, TypeVar

from pydantic import ValidationError

from playrunner.credentials.models import StandardCredential, parse_credential
from playrunner.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=StandardCredential)


class CredentialStore(Protocol):
    def find_by_id(self, credential_id: str, expected: Type[C], context: Any = None) -> Optional[C]:
        ...


class InMemoryCredentialStore:
    """Holds credential records in a dict keyed by id."""

    def __init__(self, credentials: Iterable[StandardCredential] = ()):
        self._credentials: Dict[str, StandardCredential] = {}
        for credential in credentials:
            self.add(credential)

    def add(self, credential: StandardCredential) -> None:
        self._credentials[credential.id] = credential

    def find_by_id(self, credential_id: str, expected: Type[C], context: Any = None) -> Optional[C]:
        credential = self._credentials.get(credential_id)
        if isinstance(credential, expected):
            return credential
        return None

    def __len__(self) -> int:
        return len(self._credentials)


class FileCredentialStore(InMemoryCredentialStore):
    """
    Credential store backed by a JSON document:

        {"credentials": [{"id": "deploy-key", "kind": "private_key",
                          "username": "deploy", "private_key": "-----BEGIN..."}]}

    The file is read once, when the store is created.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._load(self.path))

    @staticmethod
    def _load(path: Path):
        if not path.is_file():
            raise ConfigurationError(
                ErrorCode.CONFIG_FILE_NOT_FOUND,
                f"Credentials file not found: {path}",
            )
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                ErrorCode.CREDENTIAL_STORE_INVALID,
                f"Credentials file {path} is not valid JSON (line {e.lineno})",
            ) from e

        entries = document.get("credentials", []) if isinstance(document, dict) else None
        if not isinstance(entries, list):
            raise ConfigurationError(
                ErrorCode.CREDENTIAL_STORE_INVALID,
                f"Credentials file {path} must hold a 'credentials' list",
            )

        credentials = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigurationError(
                    ErrorCode.CREDENTIAL_STORE_INVALID,
                    f"Credential entry #{index} in {path} is not an object",
                )
            try:
                credentials.append(parse_credential(entry))
            except ValidationError as e:
                # Only field locations are reported, pydantic would echo input values.
                fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
                raise ConfigurationError(
                    ErrorCode.CREDENTIAL_STORE_INVALID,
                    f"Credential entry #{index} in {path} is invalid",
                    details={"fields": fields},
                ) from None
        logger.debug(f"Loaded {len(credentials)} credential(s) from {path}")
        return credentials
