"""
Configuration settings for the Users API
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration read from the environment"""

    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "users"
    database_url: Optional[str] = None
    pool_min_size: int = 2
    pool_max_size: int = 10
    command_timeout: int = 60
    port: int = 5000
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (``os.environ`` by default)"""
        if env is None:
            env = os.environ

        origins = [
            origin.strip()
            for origin in env.get("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        settings = cls(
            db_host=env.get("DB_HOST", "localhost"),
            db_port=_get_int(env, "DB_PORT", 5432),
            db_user=env.get("DB_USER", "postgres"),
            db_password=env.get("DB_PASSWORD", ""),
            db_name=env.get("DB_NAME", "users"),
            database_url=env.get("DATABASE_URL") or None,
            pool_min_size=_get_int(env, "DB_POOL_MIN_SIZE", 2),
            pool_max_size=_get_int(env, "DB_POOL_MAX_SIZE", 10),
            command_timeout=_get_int(env, "DB_COMMAND_TIMEOUT", 60),
            port=_get_int(env, "PORT", 5000),
            allowed_origins=origins or ["*"],
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

        if settings.pool_min_size < 0 or settings.pool_max_size < 1:
            raise ValueError("Pool sizes must be non-negative and the maximum at least 1")
        if settings.pool_min_size > settings.pool_max_size:
            raise ValueError("DB_POOL_MIN_SIZE cannot exceed DB_POOL_MAX_SIZE")

        return settings

    @property
    def dsn(self) -> str:
        """Connection string handed to asyncpg"""
        if self.database_url:
            return self.database_url
        credentials = quote(self.db_user, safe="")
        if self.db_password:
            credentials += ":" + quote(self.db_password, safe="")
        return f"postgresql://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"

    def describe(self) -> dict:
        """Effective configuration with credentials masked, for startup logs"""
        return {
            "database": "DATABASE_URL" if self.database_url else f"{self.db_host}:{self.db_port}/{self.db_name}",
            "db_user": None if self.database_url else self.db_user,
            "db_password": "***REDACTED***" if self.db_password else None,
            "pool_size": f"{self.pool_min_size}..{self.pool_max_size}",
            "command_timeout": self.command_timeout,
            "port": self.port,
            "allowed_origins": self.allowed_origins,
            "log_level": self.log_level,
        }


def log_settings(settings: Settings) -> None:
    for key, value in settings.describe().items():
        logger.info(f"Config {key}: {value}")
