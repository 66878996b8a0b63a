"""
Push popped, hidden or foreign commits onto the current branch.

A commit whose parent is the current tip is pushed by moving the tip
(fast-forward). Any other commit is re-created: a placeholder commit carrying
the original author and message is made on the tip and recorded with undo,
then the original is cherry-picked (or reverted, for a backout) into the index
and the placeholder is amended with the result. If the apply step conflicts,
the batch stops and the placeholder stays as the pushed top until the user
resolves and refreshes, or undoes.

"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from patchkeeper.git.utils import HEAD, refresh_signature
from patchkeeper.meta.errors import PreconditionError
from patchkeeper.queue.result import OperationResult

if TYPE_CHECKING:
	from pygit2 import Commit

	from patchkeeper.git.utils import PatchRepoContext
	from patchkeeper.meta.metadata import Metadata

logger = logging.getLogger(__name__)


class PushOp(Enum):
	"""How a commit is brought onto the branch."""

	NORMAL = "normal"
	GRAFT = "graft"
	BACKOUT = "backout"


def _fast_forward(ctx: PatchRepoContext, meta: Metadata, commit: Commit, op: PushOp, result: OperationResult) -> bool:
	if op is not PushOp.NORMAL:
		return False

	head = ctx.head_commit()
	if head is None or head.id != commit.parent_ids[0]:
		return False

	result.record("push", commit)
	ctx.reset_hard(commit)

	commit_id = str(commit.id)
	with meta.branches.checkout(ctx.head_name()) as branch:
		branch.hidden.remove(commit_id)
		branch.popped.remove(commit_id)
		branch.pushed.add_top(commit_id)

	meta.commit(ctx, "push (fast-forward)")
	return True


def _new(ctx: PatchRepoContext, meta: Metadata, commit: Commit, op: PushOp) -> None:
	message = commit.message or "<empty>"
	if op is PushOp.BACKOUT:
		message = f"Backout: {message}"

	head = ctx.require_head_commit()
	placeholder_id = ctx.create_commit(
		message,
		ctx.write_index_tree(),
		[str(head.id)],
		update_ref=HEAD,
		author=refresh_signature(commit.author),
		committer=refresh_signature(commit.committer),
	)
	logger.debug("Created placeholder %s for %s", placeholder_id, commit.id)

	commit_id = str(commit.id)
	with meta.branches.checkout(ctx.head_name()) as branch:
		if op is PushOp.NORMAL:
			branch.hidden.remove(commit_id)
			branch.popped.remove(commit_id)
		branch.pushed.add_top(placeholder_id)

	meta.commit_with_undo(ctx, "push (new)")


def _refresh(ctx: PatchRepoContext, meta: Metadata, result: OperationResult) -> None:
	amended_id = ctx.amend_head()
	ctx.cleanup_state()
	result.record("push", ctx.find_commit(amended_id))

	with meta.branches.checkout(ctx.head_name()) as branch:
		branch.pushed.replace_top(amended_id)

	meta.commit(ctx, "push (refresh)")


def _not_fast_forward(
	ctx: PatchRepoContext, meta: Metadata, commit: Commit, op: PushOp, result: OperationResult
) -> bool:
	_new(ctx, meta, commit, op)

	conflicts = ctx.revert(commit) if op is PushOp.BACKOUT else ctx.cherrypick(commit)
	if conflicts:
		logger.info("Push of %s stopped on %d conflicting paths", commit.id, len(conflicts))
		result.record("push", commit)
		result.conflicts = conflicts
		return False

	_refresh(ctx, meta, result)
	return True


def push(ctx: PatchRepoContext, meta: Metadata, commits: list[Commit], op: PushOp = PushOp.NORMAL) -> OperationResult:
	"""
	Push ``commits`` in order, stopping at the first one that conflicts.

	Raises:
		PreconditionError: If there is nothing to push, or a commit is an
			initial or merge commit, or is already pushed (except for a backout)
	"""
	if not commits:
		msg = "nothing to push"
		raise PreconditionError(msg)

	result = OperationResult()
	for commit in commits:
		if not commit.parent_ids:
			msg = "cannot push initial commit"
			raise PreconditionError(msg)
		if len(commit.parent_ids) > 1:
			msg = "cannot push merge commit"
			raise PreconditionError(msg)
		if op is not PushOp.BACKOUT:
			with meta.branches.checkout(ctx.head_name()) as branch:
				if branch.pushed.contains(str(commit.id)):
					msg = "already pushed"
					raise PreconditionError(msg)

		if _fast_forward(ctx, meta, commit, op, result):
			continue

		if not _not_fast_forward(ctx, meta, commit, op, result):
			break

	return result


def push_revspec(ctx: PatchRepoContext, meta: Metadata, revspec: str) -> OperationResult:
	"""Push popped commits from the bottom of the queue up to and including ``revspec``."""
	commit = ctx.find_commit_by_revspec(revspec)
	with meta.branches.checkout(ctx.head_name()) as branch:
		if not branch.popped.contains(str(commit.id)):
			msg = "cannot push non-popped commit"
			raise PreconditionError(msg)
		commit_ids = branch.popped.range_reversed(str(commit.id))
	return push(ctx, meta, ctx.find_commits(commit_ids))


def push_all(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Push every popped commit, most recently popped first."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.popped.all_reversed()
	return push(ctx, meta, ctx.find_commits(commit_ids))


def push_next(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Push the most recently popped commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.popped.bottom_as_list()
	return push(ctx, meta, ctx.find_commits(commit_ids))


def push_move(ctx: PatchRepoContext, meta: Metadata, revspec: str) -> OperationResult:
	"""Push a single popped or hidden commit, out of queue order."""
	commit = ctx.find_commit_by_revspec(revspec)
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_id = str(commit.id)
		if not branch.hidden.contains(commit_id) and not branch.popped.contains(commit_id):
			msg = "cannot move non-popped commit (use --graft)"
			raise PreconditionError(msg)
	return push(ctx, meta, [commit])


def push_graft(ctx: PatchRepoContext, meta: Metadata, revspec: str) -> OperationResult:
	"""Copy any commit onto the branch as a new patch."""
	return push(ctx, meta, [ctx.find_commit_by_revspec(revspec)], PushOp.GRAFT)


def push_backout(ctx: PatchRepoContext, meta: Metadata, revspec: str) -> OperationResult:
	"""Add a new patch that reverts ``revspec``."""
	return push(ctx, meta, [ctx.find_commit_by_revspec(revspec)], PushOp.BACKOUT)
