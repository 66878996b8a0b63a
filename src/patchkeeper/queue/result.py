"""Outcome of a patch-queue operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from patchkeeper.git.utils import short_id, summary

if TYPE_CHECKING:
	from pygit2 import Commit


@dataclass
class PatchAction:
	"""One step taken on one commit, e.g. ``push`` or ``hide``."""

	action: str
	commit_id: str
	short_id: str
	summary: str

	@classmethod
	def from_commit(cls, action: str, commit: Commit) -> PatchAction:
		"""Describe ``action`` applied to ``commit``."""
		return cls(action, str(commit.id), short_id(commit), summary(commit))


@dataclass
class OperationResult:
	"""
	Steps an operation performed, in order.

	``conflicts`` is non-empty when the operation stopped at a cherry-pick or
	revert that left conflicts in the index. That is a pause, not a failure:
	every step already recorded has been committed.

	"""

	actions: list[PatchAction] = field(default_factory=list)
	conflicts: list[str] = field(default_factory=list)

	@property
	def paused(self) -> bool:
		"""Return True if the operation stopped on conflicts."""
		return bool(self.conflicts)

	def record(self, action: str, commit: Commit) -> None:
		"""Append a step."""
		self.actions.append(PatchAction.from_commit(action, commit))
