"""Tests for the flag/value property store."""

from __future__ import annotations

import pytest

from patchkeeper.meta import MetadataFormatError, MetadataPropertyError, Properties


@pytest.mark.unit
class TestProperties:
	"""Test cases for Properties."""

	def test_absent_property(self) -> None:
		"""Absent properties read as unset flags and missing values."""
		properties = Properties()

		assert properties.is_empty()
		assert not properties.contains("revision")
		assert properties.get_flag("hidden") is False
		assert properties.get("revision") is None

	def test_flag(self) -> None:
		"""Flags can be set, read and removed."""
		properties = Properties()
		properties.set_flag("hidden")

		assert properties.contains("hidden")
		assert properties.get_flag("hidden") is True

		properties.remove("hidden")
		assert properties.get_flag("hidden") is False

	def test_value_conversion(self) -> None:
		"""Values are stored as strings and converted on access."""
		properties = Properties()
		properties.set("revision", 7)

		assert properties.get("revision") == "7"
		assert properties.get("revision", int) == 7

	def test_flag_read_as_value(self) -> None:
		"""Reading a flag as a value is a property error."""
		properties = Properties()
		properties.set_flag("hidden")

		with pytest.raises(MetadataPropertyError, match="'hidden' is a flag, not a value"):
			properties.get("hidden")

	def test_value_read_as_flag(self) -> None:
		"""Reading a value as a flag is a property error."""
		properties = Properties()
		properties.set("hidden", "yes")

		with pytest.raises(MetadataPropertyError, match="'hidden' is a value, not a flag"):
			properties.get_flag("hidden")

	def test_unparseable_value(self) -> None:
		"""A value that does not convert is a format error."""
		properties = Properties()
		properties.set("revision", "three")

		with pytest.raises(MetadataFormatError, match="'revision' is not parseable"):
			properties.get("revision", int)

	def test_set_replaces_kind(self) -> None:
		"""Setting a value over a flag (and back) replaces it."""
		properties = Properties()
		properties.set_flag("mode")
		properties.set("mode", "fast")
		assert properties.get("mode") == "fast"

		properties.set_flag("mode")
		assert properties.get_flag("mode") is True
		assert len(properties) == 1

	def test_iteration_sorted(self) -> None:
		"""Iteration yields (name, value) pairs sorted by name."""
		properties = Properties()
		properties.set("undo", "abc")
		properties.set_flag("hidden")
		properties.set("revision", 2)

		assert list(properties) == [("hidden", None), ("revision", "2"), ("undo", "abc")]

	def test_remove_missing(self) -> None:
		"""Removing an absent property is a no-op."""
		properties = Properties()
		properties.remove("undo")
		assert properties.is_empty()
