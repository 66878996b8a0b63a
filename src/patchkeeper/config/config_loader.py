"""
Load the patchkeeper configuration file.

The file is YAML, validated against :class:`AppConfigSchema`. One loader is
shared per process through :meth:`ConfigLoader.get_instance`.

"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from patchkeeper.config.config_schema import AppConfigSchema

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".patchkeeper.yml"


class ConfigError(Exception):
	"""Base class for configuration errors."""


class ConfigParsingError(ConfigError):
	"""The configuration file is unreadable, not a YAML mapping, or fails validation."""


def config_search_path() -> list[Path]:
	"""Return the files tried, in order, when no file is given explicitly."""
	return [
		Path(CONFIG_FILE_NAME),
		Path(xdg_config_home) / "patchkeeper" / "config.yml",
		Path.home() / ".patchkeeper" / "config.yml",
	]


def read_config_file(path: Path) -> dict[str, Any]:
	"""
	Read a YAML mapping from ``path``; an empty file yields an empty mapping.

	Raises:
		ConfigParsingError: If the file cannot be read, is not valid YAML or
			does not hold a mapping
	"""
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as e:
		msg = f"cannot read configuration file {path}: {e}"
		raise ConfigParsingError(msg) from e

	try:
		content = yaml.safe_load(text)
	except yaml.YAMLError as e:
		msg = f"configuration file {path} is not valid YAML"
		raise ConfigParsingError(msg) from e

	if content is None:
		return {}
	if not isinstance(content, dict):
		msg = f"configuration file {path} must contain a mapping"
		raise ConfigParsingError(msg)
	return content


class ConfigLoader:
	"""
	Process-wide holder of the validated configuration.

	An explicit file always wins. Otherwise the first existing file from
	:func:`config_search_path` is used, and without one the schema defaults
	apply.

	"""

	_instance: "ConfigLoader | None" = None

	@classmethod
	def get_instance(cls, config_file: Path | None = None, reload: bool = False) -> "ConfigLoader":
		"""
		Return the shared loader, creating it on first use.

		Args:
			config_file: Explicit configuration file
			reload: Re-read the configuration of an existing loader
		"""
		if cls._instance is None:
			cls._instance = cls(config_file)
		elif reload:
			cls._instance.reload_config(config_file)
		return cls._instance

	@classmethod
	def reset_instance(cls) -> None:
		"""Forget the shared loader."""
		cls._instance = None

	def __init__(self, config_file: Path | None = None) -> None:
		"""Load the configuration, from ``config_file`` if given."""
		self._explicit_file = config_file
		self.source: Path | None = None
		self._config = self._load()

	def reload_config(self, config_file: Path | None = None) -> None:
		"""Re-read the configuration, switching to ``config_file`` if given."""
		if config_file is not None:
			self._explicit_file = config_file
		self._config = self._load()
		logger.debug("Configuration reloaded from %s", self.source or "defaults")

	def _find_file(self) -> Path | None:
		if self._explicit_file is not None:
			return self._explicit_file.expanduser().resolve()
		return next((path for path in config_search_path() if path.exists()), None)

	def _load(self) -> AppConfigSchema:
		self.source = self._find_file()
		if self.source is None:
			logger.debug("No configuration file found, using defaults")
			return AppConfigSchema()
		if not self.source.exists():
			logger.warning("Configuration file %s not found, using defaults", self.source)
			return AppConfigSchema()

		settings = read_config_file(self.source)
		try:
			config = AppConfigSchema.model_validate(settings)
		except ValidationError as e:
			msg = f"invalid configuration in {self.source}: {e}"
			raise ConfigParsingError(msg) from e

		logger.info("Loaded configuration from %s", self.source)
		return config

	@property
	def get(self) -> AppConfigSchema:
		"""Return the validated configuration."""
		return self._config
