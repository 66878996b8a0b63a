"""Tests for branch operations."""

from __future__ import annotations

import pytest

from patchkeeper.git.utils import GitError
from patchkeeper.meta import PreconditionError
from patchkeeper.queue import (
	BranchEntry,
	branch_delete,
	branch_hide,
	branch_list,
	branch_new,
	branch_rename,
	branch_set,
	branch_unhide,
)
from patchkeeper.queue.branches import is_branch_hidden
from tests.base import GitTestBase


@pytest.mark.git
class TestBranchOperations(GitTestBase):
	"""Test cases for branch create, switch, rename and delete."""

	@pytest.fixture(autouse=True)
	def topic_branch(self, setup_repository: None) -> None:
		"""Create ``topic`` with one patch and switch back to the first branch."""
		self.main = self.repo.head_name()
		branch_new(self.repo, "topic")
		self.patch = self.new_patch("a.txt", "a\n", "topic patch")
		branch_set(self.repo, self.main)

	def test_branch_new_switches(self) -> None:
		"""bnew creates the branch at HEAD and checks it out."""
		branch_new(self.repo, "other")

		assert self.repo.head_name() == "other"
		assert self.head_id() == str(self.base.id)

	def test_branch_new_exists(self) -> None:
		"""bnew refuses an existing name."""
		with pytest.raises(PreconditionError, match="branch already exists"):
			branch_new(self.repo, "topic")

	def test_branch_set(self) -> None:
		"""bset checks out the branch and its tree."""
		branch_set(self.repo, "topic")

		assert self.repo.head_name() == "topic"
		assert self.head_id() == self.patch
		assert self.read("a.txt") == "a\n"

	def test_branch_set_unknown(self) -> None:
		"""bset of a missing branch fails."""
		with pytest.raises(GitError, match="branch 'nope' not found"):
			branch_set(self.repo, "nope")

	def test_branch_rename_moves_metadata(self) -> None:
		"""brename carries the branch's queues to the new name."""
		branch_rename(self.repo, self.meta, "topic", "feature")

		assert not self.repo.branch_exists("topic")
		assert self.queues(name="feature") == ([], [], [self.patch])
		assert self.meta.branches.names() == ["feature"]
		self.reopen()

	def test_branch_delete_requires_force(self) -> None:
		"""A branch with patches is only deleted with force."""
		with pytest.raises(PreconditionError, match=r"use --force to delete"):
			branch_delete(self.repo, self.meta, "topic")

		assert self.repo.branch_exists("topic")
		self.meta.branches.ensure_released()

		branch_delete(self.repo, self.meta, "topic", force=True)

		assert not self.repo.branch_exists("topic")
		assert not self.meta.branches.contains("topic")
		assert self.patch not in self.meta.parents()

	def test_branch_delete_empty(self) -> None:
		"""A branch without metadata is deleted without force."""
		branch_new(self.repo, "scratch")
		branch_set(self.repo, self.main)

		branch_delete(self.repo, self.meta, "scratch")

		assert not self.repo.branch_exists("scratch")

	def test_branch_delete_current(self) -> None:
		"""The checked out branch cannot be deleted."""
		with pytest.raises(PreconditionError, match="cannot delete current branch"):
			branch_delete(self.repo, self.meta, self.main, force=True)


@pytest.mark.git
class TestBranchVisibility(GitTestBase):
	"""Test cases for hiding and listing branches."""

	@pytest.fixture(autouse=True)
	def topic_branch(self, setup_repository: None) -> None:
		"""Create ``topic`` and switch back to the first branch."""
		self.main = self.repo.head_name()
		branch_new(self.repo, "topic")
		branch_set(self.repo, self.main)

	def test_branch_list_marks_head(self) -> None:
		"""blist returns every visible branch and marks the current one."""
		entries = branch_list(self.repo, self.meta)

		assert sorted(entries, key=lambda entry: entry.name) == sorted(
			[BranchEntry(self.main, True), BranchEntry("topic", False)], key=lambda entry: entry.name
		)

	def test_hide_then_unhide(self) -> None:
		"""Hidden branches only show up when listing hidden branches."""
		assert branch_hide(self.repo, self.meta, ["topic"]) == ["topic"]

		assert is_branch_hidden(self.reopen(), "topic")
		assert [entry.name for entry in branch_list(self.repo, self.meta)] == [self.main]
		assert [entry.name for entry in branch_list(self.repo, self.meta, hidden=True)] == ["topic"]

		branch_unhide(self.repo, self.meta, ["topic"])

		assert not is_branch_hidden(self.meta, "topic")

	def test_hide_twice(self) -> None:
		"""Hiding an already hidden branch fails."""
		branch_hide(self.repo, self.meta, ["topic"])

		with pytest.raises(PreconditionError, match="branch 'topic' already hidden"):
			branch_hide(self.repo, self.meta, ["topic"])

	def test_unhide_visible(self) -> None:
		"""Unhiding a visible branch fails."""
		with pytest.raises(PreconditionError, match="branch 'topic' is not hidden"):
			branch_unhide(self.repo, self.meta, ["topic"])

	def test_hide_unknown(self) -> None:
		"""Only existing branches can be hidden."""
		with pytest.raises(GitError, match="branch 'nope' not found"):
			branch_hide(self.repo, self.meta, ["nope"])
