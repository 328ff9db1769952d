# playrunner/config.py
# Configuration management loaded from the process environment

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from playrunner.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallationConfig:
    # (name, home) pairs, in registration order; the first one is the default
    installations: Tuple[Tuple[str, str], ...] = ()
    default_installation: Optional[str] = None


@dataclass(frozen=True)
class CredentialConfig:
    credentials_file: Optional[Path] = None
    key_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    file_name: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class PlayrunnerConfig:
    installation: InstallationConfig = field(default_factory=InstallationConfig)
    credentials: CredentialConfig = field(default_factory=CredentialConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "PlayrunnerConfig":
        installation = InstallationConfig(
            installations=parse_installations(os.getenv("PLAYRUNNER_INSTALLATIONS", "")),
            default_installation=os.getenv("PLAYRUNNER_DEFAULT_INSTALLATION") or None,
        )

        credentials_file = os.getenv("PLAYRUNNER_CREDENTIALS_FILE")
        credentials = CredentialConfig(
            credentials_file=Path(credentials_file) if credentials_file else None,
            key_dir=Path(os.getenv("PLAYRUNNER_KEY_DIR", tempfile.gettempdir())),
        )

        log = LogConfig(
            level=os.getenv("PLAYRUNNER_LOG_LEVEL", "INFO"),
            file_name=os.getenv("PLAYRUNNER_LOG_FILE") or None,
        )

        return cls(installation=installation, credentials=credentials, log=log)


def parse_installations(raw: str) -> Tuple[Tuple[str, str], ...]:
    """
    Parse ``name=home;name=home`` into ordered (name, home) pairs.

    An entry without ``=`` registers an installation with a blank home, which
    resolves executables through PATH.
    """
    pairs: List[Tuple[str, str]] = []
    for entry in raw.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        name, _, home = entry.partition("=")
        name = name.strip()
        if not name:
            raise ConfigurationError(
                ErrorCode.CONFIG_INVALID,
                f"Installation entry '{entry}' has no name",
            )
        pairs.append((name, home.strip()))
    return tuple(pairs)


_config: Optional[PlayrunnerConfig] = None


def get_config() -> PlayrunnerConfig:
    global _config
    if _config is None:
        _config = PlayrunnerConfig.from_env()
    return _config


def set_config(config: Optional[PlayrunnerConfig]) -> None:
    global _config
    _config = config


def setup_logging(config: Optional[PlayrunnerConfig] = None) -> None:
    cfg = config or get_config()

    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if cfg.log.file_name:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            cfg.log.file_name,
            maxBytes=cfg.log.max_file_size_mb * 1024 * 1024,
            backupCount=cfg.log.backup_count,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, cfg.log.level.upper(), logging.INFO),
        format=cfg.log.format,
        handlers=handlers,
        force=True,
    )
