import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///stacks.db"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class CascadeMode(str, Enum):
    """What happens to the books on a bookcase's shelves when it is deleted"""
    UNASSIGN = "unassign"   # Keep the catalog record, clear its shelf
    DELETE = "delete"       # Remove the catalog record entirely


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from the environment by ``from_env``"""

    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    cascade_mode: CascadeMode = CascadeMode.UNASSIGN
    cascade_stale_after_seconds: int = 300
    sqlite_busy_timeout_ms: int = 5000

    @property
    def cascade_stale_after(self) -> timedelta:
        return timedelta(seconds=self.cascade_stale_after_seconds)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        log_level = env.get("STACKS_LOG_LEVEL", "INFO").upper()
        if log_level not in logging.getLevelNamesMapping():
            raise ConfigurationError(f"Unknown log level: {log_level}", key="STACKS_LOG_LEVEL")

        raw_mode = env.get("STACKS_CASCADE_MODE", CascadeMode.UNASSIGN.value).lower()
        try:
            cascade_mode = CascadeMode(raw_mode)
        except ValueError:
            raise ConfigurationError(
                f"STACKS_CASCADE_MODE must be 'unassign' or 'delete', got {raw_mode!r}",
                key="STACKS_CASCADE_MODE",
            )

        return cls(
            database_url=env.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            log_level=log_level,
            cascade_mode=cascade_mode,
            cascade_stale_after_seconds=_non_negative_int(env, "STACKS_CASCADE_STALE_AFTER", 300),
            sqlite_busy_timeout_ms=_non_negative_int(env, "STACKS_SQLITE_BUSY_TIMEOUT", 5000),
        )


def _non_negative_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", key=key)
    if value < 0:
        raise ConfigurationError(f"{key} cannot be negative", key=key)
    return value


def configure_logging(level: str = "INFO") -> None:
    """Install the root log handler"""
    logging.basicConfig(level=level, format=LOG_FORMAT)
