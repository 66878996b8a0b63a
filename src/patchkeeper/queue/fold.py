"""Fold popped commits into the current tip."""

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


def fold(ctx: PatchRepoContext, meta: Metadata, commits: list[Commit]) -> OperationResult:
	"""
	Squash each popped commit into the tip, in order.

	A commit that conflicts is dropped from the popped queue and the snapshot
	is committed with undo, so ``resolve --undo`` can bring it back. The
	batch stops there; the tip is not amended until ``refresh``, which also
	starts tracking the tip if nothing was pushed.

	Raises:
		PreconditionError: If there is nothing to fold or a commit is not popped
	"""
	if not commits:
		msg = "nothing to fold"
		raise PreconditionError(msg)

	name = ctx.head_name()
	result = OperationResult()

	for commit in commits:
		with meta.branches.checkout(name) as branch:
			if not branch.popped.remove(str(commit.id)):
				msg = "cannot fold non-popped commit"
				raise PreconditionError(msg)

			result.record("fold", commit)
			conflicts = ctx.cherrypick(commit)
			if not conflicts:
				amended_id = ctx.amend_head()
				ctx.cleanup_state()
				if branch.pushed.is_empty():
					branch.pushed.add_top(amended_id)
				else:
					branch.pushed.replace_top(amended_id)

		if conflicts:
			logger.info("Fold of %s stopped on %d conflicting paths", commit.id, len(conflicts))
			meta.commit_with_undo(ctx, "fold")
			result.conflicts = conflicts
			break

		meta.commit(ctx, "fold")

	return result


def fold_revspecs(ctx: PatchRepoContext, meta: Metadata, revspecs: list[str]) -> OperationResult:
	"""Fold the named commits, in the order given."""
	return fold(ctx, meta, ctx.find_commits_by_revspecs(revspecs))


def fold_next(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Fold the most recently popped commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.popped.bottom_as_list()
	return fold(ctx, meta, ctx.find_commits(commit_ids))
