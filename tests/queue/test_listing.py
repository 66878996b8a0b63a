"""Tests for patch listing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from patchkeeper.git.utils import GitError
from patchkeeper.queue import (
	PatchState,
	branch_hide,
	branch_new,
	branch_set,
	hide_next,
	init,
	list_branch_patches,
	pop_next,
)
from tests.base import GitTestBase

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.git
class TestListing(GitTestBase):
	"""Test cases for list_branch_patches."""

	def test_popped_then_pushed(self) -> None:
		"""Popped patches come first and the tip is marked."""
		first = self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		third = self.new_patch("c.txt", "c\n", "third")
		pop_next(self.repo, self.meta)

		[listing] = list_branch_patches(self.repo, self.meta)

		assert listing.name == self.repo.head_name()
		assert not listing.hidden
		assert [(patch.commit_id, patch.state, patch.is_tip) for patch in listing.patches] == [
			(third, PatchState.POPPED, False),
			(second, PatchState.PUSHED, True),
			(first, PatchState.PUSHED, False),
		]
		assert listing.patches[0].summary == "third"

	def test_hidden_patches(self) -> None:
		"""With hidden set only the hidden queue is listed."""
		patch = self.new_patch("a.txt", "a\n", "first")
		pop_next(self.repo, self.meta)
		hide_next(self.repo, self.meta)

		[listing] = list_branch_patches(self.repo, self.meta, hidden=True)

		assert [(entry.commit_id, entry.state) for entry in listing.patches] == [(patch, PatchState.HIDDEN)]
		assert list_branch_patches(self.repo, self.meta)[0].patches == []

	def test_all_branches_skips_hidden(self) -> None:
		"""Hidden branches other than the current one are left out."""
		main = self.repo.head_name()
		branch_new(self.repo, "topic")
		topic_patch = self.new_patch("a.txt", "a\n", "topic patch")
		branch_new(self.repo, "secret")
		branch_set(self.repo, main)
		branch_hide(self.repo, self.meta, ["secret"])

		listings = list_branch_patches(self.repo, self.meta, all_branches=True)

		assert sorted(listing.name for listing in listings) == sorted([main, "topic"])
		topic = next(listing for listing in listings if listing.name == "topic")
		assert [entry.commit_id for entry in topic.patches] == [topic_patch]
		assert topic.patches[0].is_tip

	def test_unknown_branch(self) -> None:
		"""Naming a missing branch fails."""
		with pytest.raises(GitError, match="branch 'nope' not found"):
			list_branch_patches(self.repo, self.meta, ["nope"])

	def test_unborn_branch(self, tmp_path: Path) -> None:
		"""A fresh repository lists its unborn branch with no patches."""
		ctx, meta = init(tmp_path / "fresh", "main")

		[listing] = list_branch_patches(ctx, meta)

		assert listing.name == ctx.head_name()
		assert listing.patches == []
