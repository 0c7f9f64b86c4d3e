from .config_manager import (
    Configuration,
    ConfigurationError,
    load_config,
    get_config,
)
from .config_migration import ConfigMigration, migrate_config_file

__all__ = [
    "Configuration",
    "ConfigurationError",
    "load_config",
    "get_config",
    "ConfigMigration",
    "migrate_config_file",
]
