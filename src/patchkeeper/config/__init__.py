"""Configuration for patchkeeper."""

from patchkeeper.config.config_loader import ConfigError, ConfigLoader, ConfigParsingError
from patchkeeper.config.config_schema import AppConfigSchema

__all__ = ["AppConfigSchema", "ConfigError", "ConfigLoader", "ConfigParsingError"]
