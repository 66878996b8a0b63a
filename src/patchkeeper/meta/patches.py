"""Ordered, duplicate-free queue of patch ids."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator


class Patches:
	"""
	Double-ended queue of patch (commit) ids.

	The front of the queue is the *top* (most recently added) and the back is
	the *bottom*. Iteration and :meth:`all` go top to bottom.

	"""

	def __init__(self, ids: Iterable[str] = ()) -> None:
		"""Create a queue holding ``ids`` in top-to-bottom order."""
		self._patches: deque[str] = deque()
		for patch_id in ids:
			self.add_bottom(patch_id)

	def __len__(self) -> int:
		"""Return the number of queued patches."""
		return len(self._patches)

	def __iter__(self) -> Iterator[str]:
		"""Iterate from top to bottom."""
		return iter(list(self._patches))

	def __contains__(self, patch_id: object) -> bool:
		"""Return True if ``patch_id`` is queued."""
		return patch_id in self._patches

	def __eq__(self, other: object) -> bool:
		"""Compare contents and order."""
		if not isinstance(other, Patches):
			return NotImplemented
		return self._patches == other._patches

	def __repr__(self) -> str:
		"""Return a debug representation."""
		return f"Patches({list(self._patches)!r})"

	def is_empty(self) -> bool:
		"""Return True if the queue is empty."""
		return not self._patches

	def contains(self, patch_id: str) -> bool:
		"""Return True if ``patch_id`` is queued."""
		return patch_id in self._patches

	def add_top(self, patch_id: str) -> None:
		"""Add ``patch_id`` at the top, moving it there if already queued."""
		self.remove(patch_id)
		self._patches.appendleft(patch_id)

	def add_bottom(self, patch_id: str) -> None:
		"""Add ``patch_id`` at the bottom, moving it there if already queued."""
		self.remove(patch_id)
		self._patches.append(patch_id)

	def replace_top(self, patch_id: str) -> None:
		"""
		Replace the top entry with ``patch_id``.

		Raises:
			IndexError: If the queue is empty
		"""
		if not self._patches:
			msg = "cannot replace the top of an empty patch queue"
			raise IndexError(msg)
		self._patches[0] = patch_id

	def remove(self, patch_id: str) -> bool:
		"""Remove ``patch_id``; return whether it was present."""
		try:
			self._patches.remove(patch_id)
		except ValueError:
			return False
		return True

	def remove_all(self) -> None:
		"""Empty the queue."""
		self._patches.clear()

	def top(self) -> str:
		"""
		Return the top entry.

		Raises:
			IndexError: If the queue is empty
		"""
		return self._patches[0]

	def bottom(self) -> str:
		"""
		Return the bottom entry.

		Raises:
			IndexError: If the queue is empty
		"""
		return self._patches[-1]

	def top_as_list(self) -> list[str]:
		"""Return the top entry as a one-element list, or an empty list."""
		return [self._patches[0]] if self._patches else []

	def bottom_as_list(self) -> list[str]:
		"""Return the bottom entry as a one-element list, or an empty list."""
		return [self._patches[-1]] if self._patches else []

	def all(self) -> list[str]:
		"""Return every entry, top first."""
		return list(self._patches)

	def all_reversed(self) -> list[str]:
		"""Return every entry, bottom first."""
		return list(reversed(self._patches))

	def range(self, patch_id: str) -> list[str]:
		"""Return the entries strictly above ``patch_id``, top first."""
		entries = list(self._patches)
		if patch_id not in entries:
			return []
		return entries[: entries.index(patch_id)]

	def range_reversed(self, patch_id: str) -> list[str]:
		"""Return the entries from ``patch_id`` down to the bottom, bottom first."""
		entries = list(self._patches)
		if patch_id not in entries:
			return []
		return list(reversed(entries[entries.index(patch_id) :]))
