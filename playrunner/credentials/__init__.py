from playrunner.credentials.models import (
    Credential,
    OpaqueCredential,
    PasswordCredential,
    PrivateKeyCredential,
    StandardCredential,
    parse_credential,
)
from playrunner.credentials.resolver import CredentialResolver
from playrunner.credentials.store import CredentialStore, FileCredentialStore, InMemoryCredentialStore

__all__ = [
    "Credential",
    "OpaqueCredential",
    "PasswordCredential",
    "PrivateKeyCredential",
    "StandardCredential",
    "parse_credential",
    "CredentialResolver",
    "CredentialStore",
    "FileCredentialStore",
    "InMemoryCredentialStore",
]
