"""
playrunner/credentials/keyfile.py

Ephemeral on-disk copies of private key credentials.

A key file is created owner-read-only and belongs to exactly one invocation,
which is also the only caller allowed to delete it.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Callable, Optional

from playrunner.credentials.models import PrivateKeyCredential
from playrunner.errors import CredentialMaterializationError, ErrorCode

logger = logging.getLogger(__name__)

KEY_FILE_MODE = stat.S_IRUSR  # 0400


def create_ssh_key_file(
    existing: Optional[Path],
    credential: PrivateKeyCredential,
    key_dir: Optional[Path] = None,
) -> Path:
    """
    Write the private key of ``credential`` to a fresh temp file.

    When ``existing`` is given the key has already been materialized for this
    invocation and that file is returned untouched.
    """
    if existing is not None:
        return existing

    try:
        fd, name = tempfile.mkstemp(prefix="ssh", suffix=".key", dir=str(key_dir) if key_dir else None)
    except OSError as e:
        raise CredentialMaterializationError(
            ErrorCode.CREDENTIAL_KEY_FILE_FAILED,
            f"Unable to create a private key file for credentials '{credential.id}': {e.strerror}",
        ) from e

    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(credential.private_key.get_secret_value())
        os.chmod(path, KEY_FILE_MODE)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise CredentialMaterializationError(
            ErrorCode.CREDENTIAL_KEY_FILE_FAILED,
            f"Unable to write the private key file for credentials '{credential.id}': {e.strerror}",
        ) from e

    logger.debug(f"Materialized private key for '{credential.id}' at {path}")
    return path


def delete_temp_file(path: Optional[Path], on_output: Optional[Callable[[str], None]] = None) -> bool:
    """Remove ``path`` if set. Failures are reported, never raised."""
    if path is None:
        return False
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        msg = f"[WARNING] temp file {path} not deleted: {e.strerror}"
        logger.warning(msg)
        if on_output:
            on_output(msg)
        return False
