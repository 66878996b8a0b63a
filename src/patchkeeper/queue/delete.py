"""Stop tracking popped or hidden commits."""

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


def delete(ctx: PatchRepoContext, meta: Metadata, commits: list[Commit]) -> OperationResult:
	"""
	Drop each commit from the hidden or popped queue.

	The commits themselves are left alone; they stop being kept alive once no
	metadata snapshot refers to them.

	Raises:
		PreconditionError: If there is nothing to delete or a commit is neither
			hidden nor popped
	"""
	if not commits:
		msg = "nothing to delete"
		raise PreconditionError(msg)

	name = ctx.head_name()
	result = OperationResult()

	for commit in commits:
		commit_id = str(commit.id)
		with meta.branches.checkout(name) as branch:
			if not branch.hidden.remove(commit_id) and not branch.popped.remove(commit_id):
				msg = "cannot delete non-popped commit"
				raise PreconditionError(msg)

		result.record("delete", commit)
		meta.commit(ctx, "delete")

	return result


def delete_revspecs(ctx: PatchRepoContext, meta: Metadata, revspecs: list[str]) -> OperationResult:
	"""Delete the named commits."""
	return delete(ctx, meta, ctx.find_commits_by_revspecs(revspecs))


def delete_next(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Delete the most recently popped commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.popped.bottom_as_list()
	return delete(ctx, meta, ctx.find_commits(commit_ids))
