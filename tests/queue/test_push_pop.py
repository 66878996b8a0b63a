"""Tests for pushing and popping patches."""

from __future__ import annotations

import pytest

from patchkeeper.git.utils import GitError, summary
from patchkeeper.meta import PreconditionError
from patchkeeper.queue import (
	pop_all,
	pop_finalized,
	pop_next,
	pop_revspec,
	push_all,
	push_backout,
	push_graft,
	push_move,
	push_next,
	push_revspec,
)
from patchkeeper.queue.refresh import finalize
from tests.base import GitTestBase


@pytest.mark.git
class TestPop(GitTestBase):
	"""Test cases for pop."""

	def test_new_then_pop_then_push(self) -> None:
		"""Popping and pushing a single patch is a round trip through fast-forward."""
		patch = self.new_patch("a.txt", "a\n", "add a")
		assert self.queues() == ([], [], [patch])

		result = pop_next(self.repo, self.meta)

		assert [action.action for action in result.actions] == ["pop"]
		assert self.head_id() == str(self.base.id)
		assert not (self.repo_path / "a.txt").exists()
		assert self.queues() == ([], [patch], [])

		result = push_next(self.repo, self.meta)

		assert self.head_id() == patch
		assert self.read("a.txt") == "a\n"
		assert self.queues() == ([], [], [patch])
		assert self.reopen().undo_id is None

	def test_pop_order(self) -> None:
		"""The most recently popped patch ends up at the bottom of the popped queue."""
		first = self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")

		pop_all(self.repo, self.meta)

		assert self.queues() == ([], [second, first], [])
		assert self.head_id() == str(self.base.id)

	def test_pop_revspec(self) -> None:
		"""Popping to a revision pops everything above it."""
		first = self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		third = self.new_patch("c.txt", "c\n", "third")

		result = pop_revspec(self.repo, self.meta, first)

		assert [action.commit_id for action in result.actions] == [third, second]
		assert self.head_id() == first
		assert self.queues() == ([], [third, second], [first])

	def test_pop_revspec_not_pushed(self) -> None:
		"""Only pushed patches can be popped to."""
		with pytest.raises(PreconditionError, match="cannot pop non-pushed commit"):
			pop_revspec(self.repo, self.meta, str(self.base.id))

	def test_nothing_to_pop(self) -> None:
		"""Popping with an empty pushed queue fails."""
		with pytest.raises(PreconditionError, match="nothing to pop"):
			pop_next(self.repo, self.meta)

	def test_pop_finalized(self) -> None:
		"""A finalized tip can be brought back into the queue and popped."""
		patch = self.new_patch("a.txt", "a\n", "first")
		finalize(self.repo, self.meta)
		assert self.queues() == ([], [], [])

		pop_finalized(self.repo, self.meta)

		assert self.queues() == ([], [patch], [])
		assert self.head_id() == str(self.base.id)

	def test_pop_finalized_with_pushed(self) -> None:
		"""pop --finalized refuses while patches are pushed."""
		self.new_patch("a.txt", "a\n", "first")

		with pytest.raises(PreconditionError, match="cannot have pushed commits"):
			pop_finalized(self.repo, self.meta)

	def test_pop_initial_commit(self) -> None:
		"""The root commit cannot be popped."""
		with pytest.raises(PreconditionError, match="cannot pop initial commit"):
			pop_finalized(self.repo, self.meta)


@pytest.mark.git
class TestPush(GitTestBase):
	"""Test cases for push."""

	def test_push_all_fast_forward(self) -> None:
		"""push --all restores a popped stack in its original order."""
		first = self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		pop_all(self.repo, self.meta)

		result = push_all(self.repo, self.meta)

		assert [action.commit_id for action in result.actions] == [first, second]
		assert self.head_id() == second
		assert self.queues() == ([], [], [second, first])

	def test_push_revspec(self) -> None:
		"""Pushing to a revision pushes the popped patches up to and including it."""
		first = self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		third = self.new_patch("c.txt", "c\n", "third")
		pop_all(self.repo, self.meta)

		push_revspec(self.repo, self.meta, second)

		assert self.head_id() == second
		assert self.queues() == ([], [third], [second, first])

	def test_push_revspec_not_popped(self) -> None:
		"""Only popped patches can be pushed to."""
		with pytest.raises(PreconditionError, match="cannot push non-popped commit"):
			push_revspec(self.repo, self.meta, str(self.base.id))

	def test_nothing_to_push(self) -> None:
		"""Pushing with an empty popped queue fails."""
		with pytest.raises(PreconditionError, match="nothing to push"):
			push_next(self.repo, self.meta)

	def test_push_move_reorders(self) -> None:
		"""Moving a patch out of order re-creates it on the current tip."""
		first = self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		pop_all(self.repo, self.meta)

		result = push_move(self.repo, self.meta, second)

		assert not result.paused
		moved = self.head_id()
		assert moved != second
		assert summary(self.repo.find_commit(moved)) == "second"
		assert self.repo.find_commit(moved).parent_ids[0] == self.base.id
		assert self.queues() == ([], [first], [moved])
		assert self.meta.undo_id is None

		push_next(self.repo, self.meta)

		tip = self.head_id()
		assert self.queues() == ([], [], [tip, moved])
		assert self.read("a.txt") == "a\n"
		assert self.read("b.txt") == "b\n"
		self.reopen()

	def test_push_move_keeps_author(self) -> None:
		"""A re-created patch keeps the original author."""
		self.new_patch("a.txt", "a\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		pop_all(self.repo, self.meta)

		push_move(self.repo, self.meta, second)

		original = self.repo.find_commit(second)
		moved = self.repo.require_head_commit()
		assert moved.author.name == original.author.name
		assert moved.author.email == original.author.email

	def test_push_move_untracked(self) -> None:
		"""Moving requires the patch to be popped or hidden."""
		with pytest.raises(PreconditionError, match=r"cannot move non-popped commit \(use --graft\)"):
			push_move(self.repo, self.meta, str(self.base.id))

	def test_push_initial_commit(self) -> None:
		"""The root commit cannot be grafted."""
		with pytest.raises(PreconditionError, match="cannot push initial commit"):
			push_graft(self.repo, self.meta, str(self.base.id))

	def test_push_merge_commit(self) -> None:
		"""Merge commits cannot be grafted."""
		other = self.detached_commit(self.base, "other.txt", "other\n", "other")
		merge_id = self.repo.create_commit("merge", other.tree.id, [str(self.base.id), str(other.id)])

		with pytest.raises(PreconditionError, match="cannot push merge commit"):
			push_graft(self.repo, self.meta, merge_id)

	def test_graft_already_pushed(self) -> None:
		"""A pushed patch cannot be grafted onto its own branch again."""
		patch = self.new_patch("a.txt", "a\n", "first")

		with pytest.raises(PreconditionError, match="already pushed"):
			push_graft(self.repo, self.meta, patch)

	def test_unknown_revspec(self) -> None:
		"""An unresolvable revision is a git error."""
		with pytest.raises(GitError, match="revspec 'nope' not found"):
			push_graft(self.repo, self.meta, "nope")

	def test_graft_clean(self) -> None:
		"""Grafting copies a foreign commit without tracking the original."""
		foreign = self.detached_commit(self.base, "other.txt", "other\n", "foreign change")
		self.new_patch("a.txt", "a\n", "first")

		result = push_graft(self.repo, self.meta, str(foreign.id))

		assert not result.paused
		tip = self.head_id()
		assert tip != str(foreign.id)
		assert self.read("other.txt") == "other\n"
		assert self.queues()[2][0] == tip
		assert str(foreign.id) not in self.meta.parents()

	def test_graft_conflict_then_resolve_and_refresh(self) -> None:
		"""A conflicting graft pauses on a placeholder until resolved and refreshed."""
		from patchkeeper.queue import refresh, resolve_all

		foreign = self.detached_commit(self.base, "base.txt", "foreign\n", "foreign change")
		first = self.new_patch("base.txt", "first\n", "first")

		result = push_graft(self.repo, self.meta, str(foreign.id))

		assert result.paused
		assert result.conflicts == ["base.txt"]
		placeholder = self.head_id()
		assert placeholder not in (first, str(foreign.id))
		assert summary(self.repo.find_commit(placeholder)) == "foreign change"
		assert self.queues()[2] == [placeholder, first]
		assert self.meta.undo_id is not None

		self.write("base.txt", "resolved\n")
		assert resolve_all(self.repo) == ["base.txt"]
		refresh(self.repo, self.meta)

		tip = self.head_id()
		assert self.queues()[2] == [tip, first]
		assert self.tree_file(tip, "base.txt") == "resolved\n"
		assert self.repo.unresolved_conflicts() == []
		assert self.reopen().undo_id is None

	def test_batch_stops_at_conflict(self) -> None:
		"""push --all stops at the first conflicting patch."""
		first = self.new_patch("base.txt", "first\n", "first")
		second = self.new_patch("b.txt", "b\n", "second")
		pop_all(self.repo, self.meta)
		self.new_patch("base.txt", "other\n", "other")

		result = push_all(self.repo, self.meta)

		assert result.paused
		assert [action.commit_id for action in result.actions] == [first]
		assert self.queues()[1] == [second]

	def test_backout(self) -> None:
		"""A backout adds a patch that reverts the given commit."""
		patch = self.new_patch("a.txt", "a\n", "add a")

		result = push_backout(self.repo, self.meta, patch)

		assert not result.paused
		tip = self.repo.require_head_commit()
		assert summary(tip) == "Backout: add a"
		assert not (self.repo_path / "a.txt").exists()
		assert self.queues()[2] == [str(tip.id), patch]
