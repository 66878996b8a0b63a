"""Branch operations that keep branch metadata in step with git."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from patchkeeper.git.utils import GitError
from patchkeeper.meta.errors import PreconditionError
from patchkeeper.meta.metadata import HIDDEN

if TYPE_CHECKING:
	from patchkeeper.git.utils import PatchRepoContext
	from patchkeeper.meta.metadata import Metadata

logger = logging.getLogger(__name__)


@dataclass
class BranchEntry:
	"""A branch as shown by ``blist``."""

	name: str
	is_head: bool


def _require_branch(ctx: PatchRepoContext, name: str) -> None:
	if not ctx.branch_exists(name):
		msg = f"branch '{name}' not found"
		raise GitError(msg)


def is_branch_hidden(meta: Metadata, name: str) -> bool:
	"""Return True if branch ``name`` carries the hidden flag."""
	with meta.branches.checkout(name) as branch:
		return branch.properties.get_flag(HIDDEN)


def branch_new(ctx: PatchRepoContext, name: str) -> None:
	"""
	Create branch ``name`` at HEAD and switch to it.

	Raises:
		PreconditionError: If the branch already exists
	"""
	if ctx.branch_exists(name):
		msg = "branch already exists"
		raise PreconditionError(msg)
	ctx.create_branch(name)


def branch_set(ctx: PatchRepoContext, name: str) -> None:
	"""Switch to existing branch ``name``."""
	_require_branch(ctx, name)
	ctx.checkout_branch(name)


def branch_rename(ctx: PatchRepoContext, meta: Metadata, old_name: str, new_name: str) -> None:
	"""Rename a branch together with its metadata."""
	ctx.rename_branch(old_name, new_name)
	meta.branches.rename(old_name, new_name)
	meta.commit(ctx, "brename")


def branch_delete(ctx: PatchRepoContext, meta: Metadata, name: str, *, force: bool = False) -> None:
	"""
	Delete a branch and drop its metadata.

	Raises:
		PreconditionError: If ``name`` is checked out, or still has patches or
			properties and ``force`` is not set
	"""
	_require_branch(ctx, name)
	if ctx.is_head_branch(name):
		msg = "cannot delete current branch"
		raise PreconditionError(msg)

	branch = meta.branches.acquire(name)
	if not branch.is_empty() and not force:
		meta.branches.release(branch)
		msg = "branch has patches and/or properties (use --force to delete)"
		raise PreconditionError(msg)

	ctx.delete_branch(name)
	meta.branches.discard(branch)
	meta.commit(ctx, "bdelete")


def branch_hide(ctx: PatchRepoContext, meta: Metadata, names: list[str]) -> list[str]:
	"""
	Flag each branch as hidden, committing once per branch.

	Raises:
		PreconditionError: If a branch is already hidden
	"""
	for name in names:
		_require_branch(ctx, name)
		with meta.branches.checkout(name) as branch:
			if branch.properties.get_flag(HIDDEN):
				msg = f"branch '{name}' already hidden"
				raise PreconditionError(msg)
			branch.properties.set_flag(HIDDEN)
		meta.commit(ctx, "bhide")
	return names


def branch_unhide(ctx: PatchRepoContext, meta: Metadata, names: list[str]) -> list[str]:
	"""
	Clear the hidden flag on each branch, committing once per branch.

	Raises:
		PreconditionError: If a branch is not hidden
	"""
	for name in names:
		_require_branch(ctx, name)
		with meta.branches.checkout(name) as branch:
			if not branch.properties.get_flag(HIDDEN):
				msg = f"branch '{name}' is not hidden"
				raise PreconditionError(msg)
			branch.properties.remove(HIDDEN)
		meta.commit(ctx, "bunhide")
	return names


def branch_list(ctx: PatchRepoContext, meta: Metadata, *, remote: bool = False, hidden: bool = False) -> list[BranchEntry]:
	"""Return local (or remote) branches whose hidden flag equals ``hidden``."""
	entries = []
	for name in ctx.branch_names(remote=remote):
		if is_branch_hidden(meta, name) != hidden:
			continue
		entries.append(BranchEntry(name, not remote and ctx.is_head_branch(name)))
	return entries
