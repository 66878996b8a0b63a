"""Per-branch patch listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from patchkeeper.git.utils import GitError, short_id, summary
from patchkeeper.queue.branches import is_branch_hidden

if TYPE_CHECKING:
	from patchkeeper.git.utils import PatchRepoContext
	from patchkeeper.meta.metadata import Metadata

logger = logging.getLogger(__name__)


class PatchState(Enum):
	"""Queue a listed patch belongs to."""

	HIDDEN = "hidden"
	POPPED = "popped"
	PUSHED = "pushed"


@dataclass
class PatchEntry:
	"""One listed patch."""

	commit_id: str
	short_id: str
	summary: str
	state: PatchState
	is_tip: bool = False


@dataclass
class BranchPatches:
	"""The patches listed for one branch."""

	name: str
	hidden: bool
	patches: list[PatchEntry] = field(default_factory=list)


def list_branch_patches(
	ctx: PatchRepoContext,
	meta: Metadata,
	names: list[str] | None = None,
	*,
	all_branches: bool = False,
	hidden: bool = False,
) -> list[BranchPatches]:
	"""
	Collect the patches of the given branches.

	Without ``names`` the current branch is listed, or every local branch with
	``all_branches``. Hidden branches other than the current one are skipped
	unless ``hidden`` is set. Each branch lists its popped then pushed patches
	(top first), or only its hidden patches when ``hidden`` is set; the pushed
	patch that is the branch tip is marked.

	Raises:
		GitError: If a named branch does not exist
	"""
	if names:
		selected = names
	elif all_branches:
		selected = ctx.branch_names()
	else:
		selected = [ctx.head_name()]

	current_name = ctx.head_name()
	listing = []

	for name in selected:
		# The current branch may still be unborn
		if name != current_name and not ctx.branch_exists(name):
			msg = f"branch '{name}' not found"
			raise GitError(msg)

		branch_is_hidden = is_branch_hidden(meta, name)
		if name != current_name and branch_is_hidden and not hidden:
			logger.debug("Skipping hidden branch '%s'", name)
			continue

		tip = ctx.branch_tip(name)
		tip_id = str(tip.id) if tip is not None else None
		entry = BranchPatches(name, branch_is_hidden)

		with meta.branches.checkout(name) as branch:
			if hidden:
				queues = [(PatchState.HIDDEN, branch.hidden.all())]
			else:
				queues = [(PatchState.POPPED, branch.popped.all()), (PatchState.PUSHED, branch.pushed.all())]

		for state, commit_ids in queues:
			for commit in ctx.find_commits(commit_ids):
				commit_id = str(commit.id)
				entry.patches.append(
					PatchEntry(
						commit_id,
						short_id(commit),
						summary(commit),
						state,
						is_tip=state is PatchState.PUSHED and commit_id == tip_id,
					)
				)

		listing.append(entry)

	return listing
