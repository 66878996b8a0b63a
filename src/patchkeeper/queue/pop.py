"""Pop pushed commits off the current branch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from patchkeeper.meta.errors import PreconditionError
from patchkeeper.queue.result import OperationResult

if TYPE_CHECKING:
	from pygit2 import Commit

	from patchkeeper.git.utils import PatchRepoContext
	from patchkeeper.meta.metadata import Metadata

logger = logging.getLogger(__name__)


def pop(ctx: PatchRepoContext, meta: Metadata, commits: list[Commit]) -> OperationResult:
	"""
	Pop ``commits`` in order; each must be the branch tip when its turn comes.

	The tip is reset to the commit's parent and the id moves to the bottom of
	the popped queue, so the most recently popped commit is pushed first.

	Raises:
		PreconditionError: If there is nothing to pop, or a commit is not the
			tip, is an initial commit or is a merge commit
	"""
	if not commits:
		msg = "nothing to pop"
		raise PreconditionError(msg)

	name = ctx.head_name()
	result = OperationResult()

	for commit in commits:
		head = ctx.head_commit()
		if head is None or commit.id != head.id:
			msg = "cannot pop non-head commit"
			raise PreconditionError(msg)
		if not commit.parent_ids:
			msg = "cannot pop initial commit"
			raise PreconditionError(msg)
		if len(commit.parent_ids) > 1:
			msg = "cannot pop merge commit"
			raise PreconditionError(msg)

		commit_id = str(commit.id)
		with meta.branches.checkout(name) as branch:
			branch.pushed.remove(commit_id)
			branch.popped.add_bottom(commit_id)

		result.record("pop", commit)
		ctx.reset_hard(commit.parents[0])
		meta.commit(ctx, "pop")

	return result


def pop_revspec(ctx: PatchRepoContext, meta: Metadata, revspec: str) -> OperationResult:
	"""Pop every pushed commit above ``revspec``, leaving ``revspec`` as the tip."""
	commit = ctx.find_commit_by_revspec(revspec)
	with meta.branches.checkout(ctx.head_name()) as branch:
		if not branch.pushed.contains(str(commit.id)):
			msg = "cannot pop non-pushed commit"
			raise PreconditionError(msg)
		commit_ids = branch.pushed.range(str(commit.id))
	return pop(ctx, meta, ctx.find_commits(commit_ids))


def pop_all(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Pop every pushed commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.pushed.all()
	return pop(ctx, meta, ctx.find_commits(commit_ids))


def pop_next(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Pop the tip."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.pushed.top_as_list()
	return pop(ctx, meta, ctx.find_commits(commit_ids))


def pop_finalized(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""
	Bring the current tip back under queue tracking and pop it.

	Raises:
		PreconditionError: If the branch still has pushed commits
	"""
	head = ctx.require_head_commit()
	with meta.branches.checkout(ctx.head_name()) as branch:
		if not branch.pushed.is_empty():
			msg = "cannot have pushed commits"
			raise PreconditionError(msg)
		branch.pushed.add_top(str(head.id))
	logger.debug("Adopted finalized commit %s", head.id)
	return pop(ctx, meta, [head])
