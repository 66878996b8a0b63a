"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from patchkeeper.config import AppConfigSchema, ConfigLoader, ConfigParsingError


@pytest.mark.unit
@pytest.mark.fs
class TestConfigLoader:
	"""Test cases for ConfigLoader."""

	@pytest.fixture(autouse=True)
	def no_user_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
		"""Keep the user's XDG and home configuration out of the way."""
		monkeypatch.setattr("patchkeeper.config.config_loader.xdg_config_home", str(tmp_path / "xdg"))
		monkeypatch.setenv("HOME", str(tmp_path / "home"))

	def test_defaults_without_file(self) -> None:
		"""Without any configuration file the schema defaults apply."""
		loader = ConfigLoader()

		assert loader.get == AppConfigSchema()
		assert loader.get.init.default_branch == "main"
		assert loader.get.refresh.update_author is False

	def test_local_file(self) -> None:
		"""A .patchkeeper.yml in the working directory is picked up."""
		Path(".patchkeeper.yml").write_text(
			yaml.dump({"init": {"default_branch": "trunk"}, "refresh": {"update_committer": True}}),
			encoding="utf-8",
		)

		config = ConfigLoader().get

		assert config.init.default_branch == "trunk"
		assert config.refresh.update_committer is True
		assert config.refresh.update_author is False

	def test_xdg_file(self, tmp_path: Path) -> None:
		"""The XDG configuration is used when there is no local file."""
		xdg_file = tmp_path / "xdg" / "patchkeeper" / "config.yml"
		xdg_file.parent.mkdir(parents=True)
		xdg_file.write_text(yaml.dump({"identity": {"name": "Someone"}}), encoding="utf-8")

		assert ConfigLoader().get.identity.name == "Someone"

	def test_explicit_file(self, tmp_path: Path) -> None:
		"""An explicit path wins over the local file."""
		Path(".patchkeeper.yml").write_text(yaml.dump({"init": {"default_branch": "local"}}), encoding="utf-8")
		explicit = tmp_path / "explicit.yml"
		explicit.write_text(yaml.dump({"init": {"default_branch": "explicit"}}), encoding="utf-8")

		assert ConfigLoader(explicit).get.init.default_branch == "explicit"

	def test_missing_explicit_file(self, tmp_path: Path) -> None:
		"""A missing explicit file falls back to defaults."""
		assert ConfigLoader(tmp_path / "missing.yml").get == AppConfigSchema()

	def test_empty_file(self) -> None:
		"""An empty file is the same as no settings."""
		Path(".patchkeeper.yml").write_text("", encoding="utf-8")

		assert ConfigLoader().get == AppConfigSchema()

	@pytest.mark.parametrize(
		("content", "message"),
		[
			("invalid: yaml: content: :", "is not valid YAML"),
			("- just\n- a list\n", "must contain a mapping"),
		],
	)
	def test_invalid_yaml(self, content: str, message: str) -> None:
		"""Content that is not a YAML mapping is a parsing error."""
		Path(".patchkeeper.yml").write_text(content, encoding="utf-8")

		with pytest.raises(ConfigParsingError, match=message):
			ConfigLoader()

	def test_schema_violation(self) -> None:
		"""Values of the wrong type are a parsing error."""
		Path(".patchkeeper.yml").write_text(yaml.dump({"refresh": {"update_author": "sometimes"}}), encoding="utf-8")

		with pytest.raises(ConfigParsingError, match="invalid configuration in"):
			ConfigLoader()

	def test_singleton_reload(self, tmp_path: Path) -> None:
		"""get_instance caches the loader and reloads on request."""
		first = ConfigLoader.get_instance()
		assert ConfigLoader.get_instance() is first

		explicit = tmp_path / "explicit.yml"
		explicit.write_text(yaml.dump({"init": {"default_branch": "dev"}}), encoding="utf-8")
		reloaded = ConfigLoader.get_instance(explicit, reload=True)

		assert reloaded is first
		assert reloaded.get.init.default_branch == "dev"
