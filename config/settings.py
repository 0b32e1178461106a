#!/usr/bin/env python3
"""
Configuration Manager for SchemaEdit
Resolves the active dialect and connection settings from the environment
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = 'mysql'

# Accepted spellings for each driver value
DRIVER_ALIASES = {
    'mysql': 'mysql',
    'mariadb': 'mysql',
    'pgsql': 'pgsql',
    'postgresql': 'pgsql',
    'postgres': 'pgsql',
    'sqlite': 'sqlite',
    'sqlite3': 'sqlite',
}

DEFAULT_PORTS = {
    'mysql': 3306,
    'pgsql': 5432,
}


def resolve_dialect_name(value: Optional[str]) -> str:
    """
    Normalize a configured driver value to mysql, pgsql or sqlite.

    Empty values resolve to mysql silently; unrecognized values resolve to
    mysql with a warning.
    """
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_DRIVER

    key = value.strip().lower()
    if key not in DRIVER_ALIASES:
        logger.warning(f"Unknown database driver '{value}', defaulting to {DEFAULT_DRIVER}")
        return DEFAULT_DRIVER
    return DRIVER_ALIASES[key]


@dataclass
class EditorSettings:
    """SchemaEdit configuration settings"""

    base_dir: Path = None

    # Database settings
    driver: str = DEFAULT_DRIVER
    db_host: str = "127.0.0.1"
    db_port: int = None
    db_name: str = None
    db_user: str = None
    db_charset: str = "utf8mb4"

    # Loaded from environment only
    db_password: str = None

    # Runtime settings
    debug_mode: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        """Resolve paths and overlay environment variables"""
        if self.base_dir is None:
            default_root = Path(__file__).parent.parent
            self.base_dir = Path(os.environ.get('SCHEMAEDIT_HOME', default_root))
        else:
            self.base_dir = Path(self.base_dir)

        self.driver = resolve_dialect_name(os.environ.get('SCHEMAEDIT_DB_DRIVER', self.driver))
        self.db_host = os.environ.get('SCHEMAEDIT_DB_HOST', self.db_host)
        self.db_name = os.environ.get('SCHEMAEDIT_DB_NAME', self.db_name)
        self.db_user = os.environ.get('SCHEMAEDIT_DB_USER', self.db_user)
        self.db_password = os.environ.get('SCHEMAEDIT_DB_PASSWORD', self.db_password)
        self.db_charset = os.environ.get('SCHEMAEDIT_DB_CHARSET', self.db_charset)

        port = os.environ.get('SCHEMAEDIT_DB_PORT')
        if port:
            self.db_port = int(port)
        elif self.db_port is None:
            self.db_port = DEFAULT_PORTS.get(self.driver)

        self.debug_mode = os.environ.get('SCHEMAEDIT_DEBUG', str(self.debug_mode)).lower() == 'true'
        self.log_level = os.environ.get('SCHEMAEDIT_LOG_LEVEL', self.log_level).upper()
        if self.debug_mode:
            self.log_level = 'DEBUG'

    def get_safe_dict(self) -> Dict[str, Any]:
        """Get configuration as dict without sensitive values"""
        return {
            'base_dir': str(self.base_dir),
            'driver': self.driver,
            'db_host': self.db_host,
            'db_port': self.db_port,
            'db_name': self.db_name,
            'db_user': self.db_user,
            'db_charset': self.db_charset,
            'db_password': '***REDACTED***' if self.db_password else None,
            'debug_mode': self.debug_mode,
            'log_level': self.log_level,
        }


class SettingsManager:
    """Singleton configuration manager"""

    _instance: Optional['SettingsManager'] = None
    _settings: Optional[EditorSettings] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._settings is None:
            self.load_settings()

    def load_settings(self, env_file: Optional[Path] = None) -> EditorSettings:
        """Load configuration from a .env file and the environment.

        Priority (highest to lowest):
        1. Environment variables (SCHEMAEDIT_*)
        2. .env file (loaded into os.environ before settings creation)
        3. EditorSettings dataclass defaults
        """
        if env_file is None:
            default_base = Path(__file__).parent.parent
            base_dir = Path(os.environ.get('SCHEMAEDIT_HOME', default_base))
            env_file = base_dir / '.env'
        if Path(env_file).exists():
            self._load_env_file(Path(env_file))

        self._settings = EditorSettings()
        return self._settings

    def _load_env_file(self, env_file: Path):
        """Load environment variables from .env file.

        Only sets values for keys not already in os.environ,
        so exported variables take precedence over the file.
        """
        try:
            with open(env_file, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        key = key.strip()
                        if key not in os.environ:
                            os.environ[key] = value.strip().strip('"').strip("'")
        except OSError as e:
            logger.warning(f"Could not load .env file {env_file}: {e}")

    @property
    def settings(self) -> EditorSettings:
        if self._settings is None:
            self.load_settings()
        return self._settings

    @classmethod
    def reset(cls):
        """Forget the cached settings (used by tests)"""
        cls._settings = None
        cls._instance = None


def get_settings() -> EditorSettings:
    """Get the global settings instance"""
    return SettingsManager().settings
