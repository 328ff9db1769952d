from __future__ import annotations

import logging
from typing import Any, Optional

from playrunner.credentials.models import (
    Credential,
    PasswordCredential,
    PrivateKeyCredential,
    StandardCredential,
)
from playrunner.credentials.store import CredentialStore

logger = logging.getLogger(__name__)


class CredentialResolver:
    """
    Looks up a credential id and narrows it to one of the kinds an
    invocation understands.

    A blank id, a store miss, or a record of any other kind all resolve to
    ``None``; none of them is an error.
    """

    def __init__(self, store: Optional[CredentialStore]):
        self.store = store

    def resolve(self, credential_id: Optional[str], context: Any = None) -> Optional[Credential]:
        if self.store is None or not credential_id or not credential_id.strip():
            return None

        credential = self.store.find_by_id(credential_id, StandardCredential, context)
        if isinstance(credential, (PasswordCredential, PrivateKeyCredential)):
            return credential

        if credential is None:
            logger.warning(f"Credentials '{credential_id}' not found, running without credentials")
        else:
            logger.warning(
                f"Credentials '{credential_id}' are of unsupported kind '{credential.kind}', ignored"
            )
        return None
