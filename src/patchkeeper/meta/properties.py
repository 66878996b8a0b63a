"""Flag/value property store."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TypeVar

from patchkeeper.meta.errors import MetadataPropertyError

T = TypeVar("T")


class Properties:
	"""
	Mapping from property name to an optional string value.

	An absent name is unset. A name mapped to ``None`` is a flag. A name
	mapped to a string is a value, converted on access.

	"""

	def __init__(self) -> None:
		"""Create an empty property store."""
		self._properties: dict[str, str | None] = {}

	def __len__(self) -> int:
		"""Return the number of stored properties."""
		return len(self._properties)

	def __iter__(self) -> Iterator[tuple[str, str | None]]:
		"""Iterate over ``(name, value)`` pairs sorted by name."""
		return iter(sorted(self._properties.items()))

	def __eq__(self, other: object) -> bool:
		"""Compare stored entries."""
		if not isinstance(other, Properties):
			return NotImplemented
		return self._properties == other._properties

	def __repr__(self) -> str:
		"""Return a debug representation."""
		return f"Properties({self._properties!r})"

	def is_empty(self) -> bool:
		"""Return True if no property is stored."""
		return not self._properties

	def contains(self, name: str) -> bool:
		"""Return True if ``name`` is set, as either a flag or a value."""
		return name in self._properties

	def get_flag(self, name: str) -> bool:
		"""
		Read a flag.

		Args:
			name: Property name

		Returns:
			True if the flag is set, False if the property is absent

		Raises:
			MetadataPropertyError: If the property holds a value
		"""
		if name not in self._properties:
			return False
		if self._properties[name] is not None:
			msg = f"property '{name}' is a value, not a flag"
			raise MetadataPropertyError(msg)
		return True

	def set_flag(self, name: str) -> None:
		"""Set ``name`` as a flag, replacing whatever was stored."""
		self._properties[name] = None

	def get(self, name: str, convert: Callable[[str], T] = str) -> T | None:  # type: ignore[assignment]
		"""
		Read a value and convert it.

		Args:
			name: Property name
			convert: Conversion from the stored string, e.g. ``int``

		Returns:
			The converted value, or None if the property is absent

		Raises:
			MetadataPropertyError: If the property is a flag or the value cannot be converted
		"""
		if name not in self._properties:
			return None
		value = self._properties[name]
		if value is None:
			msg = f"property '{name}' is a flag, not a value"
			raise MetadataPropertyError(msg)
		try:
			return convert(value)
		except (TypeError, ValueError) as e:
			msg = f"property '{name}' is not parseable"
			raise MetadataPropertyError(msg) from e

	def set(self, name: str, value: object) -> None:
		"""Store ``value`` under ``name`` using its string form."""
		self._properties[name] = str(value)

	def remove(self, name: str) -> None:
		"""Remove ``name`` if present."""
		self._properties.pop(name, None)
