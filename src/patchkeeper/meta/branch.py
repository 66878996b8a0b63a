"""Branch records and the branch table."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from patchkeeper.meta.patches import Patches
from patchkeeper.meta.properties import Properties

logger = logging.getLogger(__name__)


class Branch:
	"""Per-branch metadata: properties plus the hidden, popped and pushed queues."""

	def __init__(self, name: str) -> None:
		"""Create an empty record for branch ``name``."""
		self.name = name
		self.properties = Properties()
		self.hidden = Patches()
		self.popped = Patches()
		self.pushed = Patches()

	def __repr__(self) -> str:
		"""Return a debug representation."""
		return (
			f"Branch(name={self.name!r}, properties={self.properties!r}, "
			f"hidden={self.hidden!r}, popped={self.popped!r}, pushed={self.pushed!r})"
		)

	def is_empty(self) -> bool:
		"""Return True if the record carries no properties and no patches."""
		return (
			self.properties.is_empty() and self.hidden.is_empty() and self.popped.is_empty() and self.pushed.is_empty()
		)

	def patch_ids(self) -> list[str]:
		"""Return every tracked id: hidden, then popped, then pushed, each top first."""
		return [*self.hidden.all(), *self.popped.all(), *self.pushed.all()]


class Branches:
	"""
	Named collection of :class:`Branch` records.

	Records are checked out with :meth:`acquire` and handed back with
	:meth:`release`. A name may only have one outstanding acquire at a time,
	and every acquired record must be released before the metadata is
	serialized or committed.

	"""

	def __init__(self) -> None:
		"""Create an empty table."""
		self._branches: dict[str, Branch] = {}
		self._acquired: dict[int, str] = {}

	def __len__(self) -> int:
		"""Return the number of stored records."""
		return len(self._branches)

	def __iter__(self) -> Iterator[Branch]:
		"""Iterate over stored records sorted by name."""
		return iter([self._branches[name] for name in sorted(self._branches)])

	def names(self) -> list[str]:
		"""Return the stored branch names, sorted."""
		return sorted(self._branches)

	def contains(self, name: str) -> bool:
		"""Return True if a record named ``name`` is stored."""
		return name in self._branches

	def outstanding(self) -> list[str]:
		"""Return the names currently checked out."""
		return sorted(self._acquired.values())

	def acquire(self, name: str) -> Branch:
		"""
		Check out the record for ``name``, creating an empty one if absent.

		Raises:
			RuntimeError: If ``name`` is already checked out
		"""
		if name in self._acquired.values():
			msg = f"branch '{name}' is already acquired"
			raise RuntimeError(msg)
		branch = self._branches.pop(name, None)
		if branch is None:
			branch = Branch(name)
		self._acquired[id(branch)] = name
		return branch

	def release(self, branch: Branch) -> None:
		"""Hand back a checked-out record, keyed by its current name."""
		self._acquired.pop(id(branch), None)
		self._branches[branch.name] = branch

	@contextmanager
	def checkout(self, name: str) -> Iterator[Branch]:
		"""Acquire the record for ``name`` for the duration of a ``with`` block."""
		branch = self.acquire(name)
		try:
			yield branch
		finally:
			self.release(branch)

	def discard(self, branch: Branch) -> None:
		"""Drop a checked-out record instead of releasing it."""
		self._acquired.pop(id(branch), None)
		logger.debug("Dropped metadata for branch '%s'", branch.name)

	def rename(self, old_name: str, new_name: str) -> None:
		"""Move the record for ``old_name`` to ``new_name``."""
		branch = self.acquire(old_name)
		branch.name = new_name
		self.release(branch)
		logger.debug("Renamed branch metadata '%s' to '%s'", old_name, new_name)

	def ensure_released(self) -> None:
		"""
		Check that no record is checked out.

		Raises:
			RuntimeError: If a record has not been released
		"""
		if self._acquired:
			names = ", ".join(self.outstanding())
			msg = f"branches still acquired: {names}"
			raise RuntimeError(msg)
