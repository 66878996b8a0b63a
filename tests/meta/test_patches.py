"""Tests for the patch queue."""

from __future__ import annotations

import pytest

from patchkeeper.meta import Patches


@pytest.mark.unit
class TestPatches:
	"""Test cases for Patches."""

	def test_empty_queue(self) -> None:
		"""An empty queue has no top, bottom or entries."""
		patches = Patches()

		assert patches.is_empty()
		assert patches.top_as_list() == []
		assert patches.bottom_as_list() == []
		assert patches.all() == []
		with pytest.raises(IndexError):
			patches.top()
		with pytest.raises(IndexError):
			patches.bottom()

	def test_add_top_and_bottom(self) -> None:
		"""Entries added at the top come first, entries added at the bottom last."""
		patches = Patches()
		patches.add_top("b")
		patches.add_top("a")
		patches.add_bottom("c")

		assert patches.all() == ["a", "b", "c"]
		assert patches.all_reversed() == ["c", "b", "a"]
		assert patches.top() == "a"
		assert patches.bottom() == "c"

	def test_no_duplicates(self) -> None:
		"""Adding a queued id moves it instead of duplicating it."""
		patches = Patches(["a", "b", "c"])
		patches.add_top("c")
		assert patches.all() == ["c", "a", "b"]

		patches.add_bottom("c")
		assert patches.all() == ["a", "b", "c"]
		assert len(patches) == 3

	def test_replace_top(self) -> None:
		"""replace_top swaps the top entry in place."""
		patches = Patches(["a", "b"])
		patches.replace_top("x")
		assert patches.all() == ["x", "b"]

	def test_replace_top_empty(self) -> None:
		"""replace_top on an empty queue is a programming error."""
		with pytest.raises(IndexError):
			Patches().replace_top("x")

	def test_remove(self) -> None:
		"""remove reports whether the id was queued."""
		patches = Patches(["a", "b"])

		assert patches.remove("a") is True
		assert patches.remove("a") is False
		assert patches.all() == ["b"]

		patches.remove_all()
		assert patches.is_empty()

	def test_range(self) -> None:
		"""range returns the entries strictly above an id, top first."""
		patches = Patches(["a", "b", "c", "d"])

		assert patches.range("c") == ["a", "b"]
		assert patches.range("a") == []
		assert patches.range("missing") == []

	def test_range_reversed(self) -> None:
		"""range_reversed returns an id and everything below it, bottom first."""
		patches = Patches(["a", "b", "c", "d"])

		assert patches.range_reversed("b") == ["d", "c", "b"]
		assert patches.range_reversed("d") == ["d"]
		assert patches.range_reversed("missing") == []

	def test_membership(self) -> None:
		"""contains and the in operator agree."""
		patches = Patches(["a"])

		assert patches.contains("a")
		assert "a" in patches
		assert "b" not in patches
		assert Patches(["a"]) == patches
