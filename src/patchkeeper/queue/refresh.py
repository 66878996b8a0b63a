"""Amend the pushed top with the working tree, and finalize the pushed queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from patchkeeper.git.utils import refresh_signature
from patchkeeper.meta.errors import PreconditionError
from patchkeeper.queue.result import OperationResult

if TYPE_CHECKING:
	from patchkeeper.git.utils import PatchRepoContext
	from patchkeeper.meta.metadata import Metadata

logger = logging.getLogger(__name__)


def refresh(
	ctx: PatchRepoContext,
	meta: Metadata,
	*,
	author: bool = False,
	committer: bool = False,
	allow_conflicts: bool = False,
) -> OperationResult:
	"""
	Amend the tip with every tracked change in the working tree.

	The tip keeps its author and committer names with a fresh timestamp;
	``author`` or ``committer`` replaces that identity with the current user.
	This is also how a push or fold paused on conflicts is completed once the
	conflicts are resolved.

	Args:
		ctx: Repository context
		meta: Open metadata snapshot
		author: Take the author identity from the current user
		committer: Take the committer identity from the current user
		allow_conflicts: Mark any remaining conflicts resolved instead of refusing

	Raises:
		GitError: If conflicts remain and ``allow_conflicts`` is not set
		PreconditionError: If the branch has no pushed commits and no fold is
			pending
	"""
	if not allow_conflicts:
		ctx.ensure_no_unresolved()

	result = OperationResult()
	with meta.branches.checkout(ctx.head_name()) as branch:
		adopt_tip = branch.pushed.is_empty()
		if adopt_tip and not ctx.cherrypick_in_progress():
			msg = "nothing to refresh"
			raise PreconditionError(msg)

		if allow_conflicts:
			ctx.mark_resolved(ctx.unresolved_conflicts())

		head = ctx.require_head_commit()
		me = ctx.signature()
		ctx.stage_tracked()
		amended_id = ctx.amend_head(
			author=me if author else refresh_signature(head.author),
			committer=me if committer else refresh_signature(head.committer),
		)
		ctx.cleanup_state()
		if adopt_tip:
			# A fold paused onto an untracked tip; the folded tip becomes the pushed top
			branch.pushed.add_top(amended_id)
		else:
			branch.pushed.replace_top(amended_id)

	result.record("refresh", ctx.find_commit(amended_id))
	meta.commit(ctx, "refresh")
	return result


def finalize(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""
	Stop tracking every pushed commit; they stay in the branch history.

	Raises:
		PreconditionError: If the branch has no pushed commits
	"""
	result = OperationResult()
	with meta.branches.checkout(ctx.head_name()) as branch:
		if branch.pushed.is_empty():
			msg = "nothing to finalize"
			raise PreconditionError(msg)

		for commit in ctx.find_commits(branch.pushed.all()):
			result.record("finalize", commit)
		branch.pushed.remove_all()

	meta.commit(ctx, "finalize")
	return result


def reset(ctx: PatchRepoContext, meta: Metadata, revspec: str) -> OperationResult:
	"""
	Move the branch tip to ``revspec``; metadata is not touched.

	Raises:
		PreconditionError: If the branch has pushed commits
	"""
	with meta.branches.checkout(ctx.head_name()) as branch:
		if not branch.pushed.is_empty():
			msg = "cannot reset with pushed commits"
			raise PreconditionError(msg)

	commit = ctx.find_commit_by_revspec(revspec)
	ctx.reset_hard(commit)
	logger.info("Reset %s to %s", ctx.head_name(), commit.id)

	result = OperationResult()
	result.record("reset", commit)
	return result
