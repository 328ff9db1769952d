"""
playrunner/credentials/models.py

Stored credential records.

Every record carries an ``id`` and a ``kind``. Only two kinds take part in an
invocation: ``password`` (username + password) and ``private_key``
(username + key material). Any other kind is kept as an opaque record so a
store can hold it without the invocation ever matching on it.

Secret fields are ``SecretStr``: ``str()`` and ``repr()`` render a mask, and
the literal is only reachable through ``get_secret_value()``.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class StandardCredential(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: str
    description: str = ""


class PasswordCredential(StandardCredential):
    kind: Literal["password"] = "password"
    username: str
    password: SecretStr


class PrivateKeyCredential(StandardCredential):
    kind: Literal["private_key"] = "private_key"
    username: str
    private_key: SecretStr = Field(description="PEM encoded private key")


class OpaqueCredential(StandardCredential):
    """A credential kind the runner has no use for (secret text, certificates...)."""
    model_config = ConfigDict(frozen=True, extra="allow")


Credential = Union[PasswordCredential, PrivateKeyCredential]

CREDENTIAL_KINDS = {
    "password": PasswordCredential,
    "private_key": PrivateKeyCredential,
}


def parse_credential(data: dict) -> StandardCredential:
    """Validate one stored record into the model matching its ``kind``."""
    model = CREDENTIAL_KINDS.get(data.get("kind"), OpaqueCredential)
    return model.model_validate(data)
