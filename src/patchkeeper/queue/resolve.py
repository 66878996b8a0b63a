"""Conflict resolution and single-step undo."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from patchkeeper.meta.errors import PreconditionError
from patchkeeper.queue.result import OperationResult

if TYPE_CHECKING:
	from patchkeeper.git.utils import PatchRepoContext
	from patchkeeper.meta.metadata import Metadata

logger = logging.getLogger(__name__)


def list_conflicts(ctx: PatchRepoContext) -> list[str]:
	"""Return the paths with unresolved conflicts."""
	return ctx.unresolved_conflicts()


def resolve_paths(ctx: PatchRepoContext, paths: list[str]) -> list[str]:
	"""
	Mark the conflicted paths among ``paths`` as resolved.

	Returns:
		The paths that were marked, in the order given

	Raises:
		PreconditionError: If none of ``paths`` is conflicted
	"""
	conflicts = set(ctx.unresolved_conflicts())
	resolved = [path for path in paths if path in conflicts]
	if not resolved:
		msg = "nothing to resolve"
		raise PreconditionError(msg)

	ctx.mark_resolved(resolved)
	logger.info("Resolved %d paths", len(resolved))
	return resolved


def resolve_all(ctx: PatchRepoContext) -> list[str]:
	"""Mark every conflicted path as resolved."""
	return resolve_paths(ctx, ctx.unresolved_conflicts())


def resolve_undo(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""
	Return to the snapshot saved before the last push or fold that could conflict.

	The branch tip is reset to the pushed top recorded in that snapshot,
	which also discards the conflicted index. If that snapshot has no pushed
	commits, a commit pushed since then is dropped by resetting to its
	parent; otherwise the tip stays where it is.

	Raises:
		PreconditionError: If there is nothing to undo
	"""
	name = ctx.head_name()
	with meta.branches.checkout(name) as branch:
		current_ids = branch.pushed.top_as_list()

	previous = meta.undo(ctx)
	if previous is None:
		msg = "nothing to undo"
		raise PreconditionError(msg)

	with previous.branches.checkout(name) as branch:
		top_ids = branch.pushed.top_as_list()

	if top_ids:
		head = ctx.find_commit(top_ids[0])
	elif current_ids:
		# The pushed commit was created on top of the tip the branch had before
		head = ctx.find_commit(current_ids[0]).parents[0]
	else:
		head = ctx.require_head_commit()

	result = OperationResult()
	result.record("restore", head)
	ctx.reset_hard(head)
	ctx.cleanup_state()

	previous.commit(ctx, "undo")
	return result
