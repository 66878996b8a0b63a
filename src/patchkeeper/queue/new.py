"""Repository initialization and new patches."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from patchkeeper.git.utils import HEAD, PatchRepoContext
from patchkeeper.meta.metadata import Metadata
from patchkeeper.queue.result import OperationResult

if TYPE_CHECKING:
	from pathlib import Path

logger = logging.getLogger(__name__)


def init(path: Path, default_branch: str) -> tuple[PatchRepoContext, Metadata]:
	"""
	Create (or open) a repository at ``path`` and commit its metadata.

	Args:
		path: Working directory of the repository
		default_branch: Initial branch name when git configures none

	Returns:
		The repository context and the committed metadata
	"""
	ctx = PatchRepoContext.initialize(path, default_branch)
	meta = Metadata.open(ctx)
	meta.commit(ctx, "init")
	return ctx, meta


def new(ctx: PatchRepoContext, meta: Metadata, message: str) -> OperationResult:
	"""
	Commit the tracked changes in the working tree as a new pushed patch.

	On an unborn branch the patch becomes the root commit.

	Raises:
		GitError: If the index has unresolved conflicts
	"""
	ctx.ensure_no_unresolved()
	name = ctx.head_name()

	ctx.stage_tracked()
	head = ctx.head_commit()
	parents = [str(head.id)] if head is not None else []
	commit_id = ctx.create_commit(message, ctx.write_index_tree(), parents, update_ref=HEAD)

	with meta.branches.checkout(name) as branch:
		branch.pushed.add_top(commit_id)

	result = OperationResult()
	result.record("new", ctx.find_commit(commit_id))
	meta.commit(ctx, "new")
	return result
