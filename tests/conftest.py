"""Global test fixtures and configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from patchkeeper.config import ConfigLoader

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
	"""
	Run every test from an empty directory with a fresh configuration.

	This keeps a ``.patchkeeper.yml`` in the real working directory from
	leaking into tests.
	"""
	workdir = tmp_path / "cwd"
	workdir.mkdir()
	monkeypatch.chdir(workdir)
	ConfigLoader.reset_instance()
	yield
	ConfigLoader.reset_instance()
