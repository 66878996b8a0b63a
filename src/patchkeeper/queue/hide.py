"""Move popped commits to and from the hidden queue."""

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


def hide(ctx: PatchRepoContext, meta: Metadata, commits: list[Commit]) -> OperationResult:
	"""
	Move each popped commit to the top of the hidden queue.

	Raises:
		PreconditionError: If there is nothing to hide or a commit is not popped
	"""
	if not commits:
		msg = "nothing to hide"
		raise PreconditionError(msg)

	name = ctx.head_name()
	result = OperationResult()

	for commit in commits:
		commit_id = str(commit.id)
		with meta.branches.checkout(name) as branch:
			if not branch.popped.remove(commit_id):
				msg = "cannot hide non-popped commit"
				raise PreconditionError(msg)
			branch.hidden.add_top(commit_id)

		result.record("hide", commit)
		meta.commit(ctx, "hide")

	return result


def hide_revspecs(ctx: PatchRepoContext, meta: Metadata, revspecs: list[str]) -> OperationResult:
	"""Hide the named commits."""
	return hide(ctx, meta, ctx.find_commits_by_revspecs(revspecs))


def hide_all(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Hide every popped commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.popped.all_reversed()
	return hide(ctx, meta, ctx.find_commits(commit_ids))


def hide_next(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Hide the most recently popped commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.popped.bottom_as_list()
	return hide(ctx, meta, ctx.find_commits(commit_ids))


def unhide(ctx: PatchRepoContext, meta: Metadata, commits: list[Commit]) -> OperationResult:
	"""
	Move each hidden commit to the top of the popped queue.

	Raises:
		PreconditionError: If there is nothing to unhide or a commit is not hidden
	"""
	if not commits:
		msg = "nothing to unhide"
		raise PreconditionError(msg)

	name = ctx.head_name()
	result = OperationResult()

	for commit in commits:
		commit_id = str(commit.id)
		with meta.branches.checkout(name) as branch:
			if not branch.hidden.remove(commit_id):
				msg = "cannot unhide non-hidden commit"
				raise PreconditionError(msg)
			branch.popped.add_top(commit_id)

		result.record("unhide", commit)
		meta.commit(ctx, "unhide")

	return result


def unhide_revspecs(ctx: PatchRepoContext, meta: Metadata, revspecs: list[str]) -> OperationResult:
	"""Unhide the named commits."""
	return unhide(ctx, meta, ctx.find_commits_by_revspecs(revspecs))


def unhide_all(ctx: PatchRepoContext, meta: Metadata) -> OperationResult:
	"""Unhide every hidden commit."""
	with meta.branches.checkout(ctx.head_name()) as branch:
		commit_ids = branch.hidden.all_reversed()
	return unhide(ctx, meta, ctx.find_commits(commit_ids))
