"""
Metadata root and its persistence protocol.

Each snapshot is stored as a commit with an empty tree whose message is the
magic summary followed by the serialized body. The commit's parents are every
patch tracked by any branch plus the undo target, so those commits stay
reachable from ``refs/patchkeeper_0`` and survive garbage collection. The
parents carry no merge meaning.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from patchkeeper.git.utils import body, summary
from patchkeeper.meta.branch import Branches
from patchkeeper.meta.errors import ConcurrencyError, MetadataFormatError, MetadataSyncError
from patchkeeper.meta.properties import Properties
from patchkeeper.meta.serialize import format_body, parse_body

if TYPE_CHECKING:
	from pygit2 import Commit

	from patchkeeper.git.utils import PatchRepoContext

logger = logging.getLogger(__name__)

MAGIC = "PatchKeeper"
REFERENCE = "refs/patchkeeper_0"

REVISION = "revision"
HIDDEN = "hidden"
UNDO = "undo"


class Metadata:
	"""Global properties, the branch table, and the commit the snapshot was loaded from."""

	def __init__(
		self,
		properties: Properties | None = None,
		branches: Branches | None = None,
		source: str | None = None,
	) -> None:
		"""Create a snapshot; with no arguments, an empty never-persisted one."""
		self.properties = properties if properties is not None else Properties()
		self.branches = branches if branches is not None else Branches()
		self.source = source
		self.warnings: list[str] = []

	def __str__(self) -> str:
		"""Return the serialized body."""
		return format_body(self.properties, self.branches)

	@property
	def revision(self) -> int:
		"""Return the revision counter (0 if never committed)."""
		return self.properties.get(REVISION, int) or 0

	@property
	def undo_id(self) -> str | None:
		"""Return the undo pointer, if set."""
		return self.properties.get(UNDO)

	@classmethod
	def from_text(cls, text: str, source: str | None = None) -> Metadata:
		"""Parse a serialized body into a snapshot."""
		properties, branches = parse_body(text)
		return cls(properties, branches, source)

	@classmethod
	def from_commit(cls, commit: Commit) -> Metadata:
		"""
		Load a snapshot from a metadata commit.

		Raises:
			MetadataFormatError: If the commit is not a metadata commit or its body is malformed
		"""
		if summary(commit) != MAGIC:
			msg = "metadata format not recognized"
			raise MetadataFormatError(msg)
		return cls.from_text(body(commit), str(commit.id))

	@classmethod
	def open(cls, ctx: PatchRepoContext) -> Metadata:
		"""
		Load and verify the latest snapshot.

		Returns an empty snapshot if the repository has no metadata yet.

		Raises:
			MetadataFormatError: If the stored snapshot cannot be parsed
			MetadataSyncError: If a branch's pushed queue does not match its ancestry
		"""
		commit = ctx.lookup_reference_commit(REFERENCE)
		if commit is None:
			logger.debug("No metadata reference, starting from an empty snapshot")
			return cls()

		meta = cls.from_commit(commit)
		meta.verify(ctx)
		logger.debug("Opened metadata revision %d from %s", meta.revision, meta.source)
		return meta

	def verify(self, ctx: PatchRepoContext) -> None:
		"""
		Check every branch's pushed queue against the branch's real ancestry.

		Walking from the tip, each pushed entry must equal the current commit,
		and the walk moves on to the commit's only parent. Nothing may follow a
		merge or root commit in the queue. Branches that no longer exist only
		produce a warning.

		Raises:
			MetadataSyncError: If a pushed entry does not match the ancestry
		"""
		for branch in self.branches:
			next_commit = ctx.branch_tip(branch.name)
			if next_commit is None:
				warning = f"metadata references to non-existing branch '{branch.name}'"
				logger.warning(warning)
				self.warnings.append(warning)
				continue

			for patch_id in branch.pushed.all():
				if next_commit is None or str(next_commit.id) != patch_id:
					msg = f"metadata out of sync with branch '{branch.name}'"
					raise MetadataSyncError(msg)
				# Only a single-parent commit continues the chain; a merge must be the last entry
				next_commit = next_commit.parents[0] if len(next_commit.parent_ids) == 1 else None

	def parents(self) -> list[str]:
		"""
		Return the keep-alive parents for the next metadata commit.

		Branches are visited by name; within each, hidden, then popped, then
		pushed ids, each top first. The undo target comes last.
		"""
		parents: list[str] = []
		for branch in self.branches:
			parents.extend(patch_id for patch_id in branch.patch_ids() if patch_id not in parents)
		undo_id = self.undo_id
		if undo_id is not None and undo_id not in parents:
			parents.append(undo_id)
		return parents

	def _commit(self, ctx: PatchRepoContext, log_message: str) -> str:
		self.branches.ensure_released()
		self.properties.set(REVISION, self.revision + 1)

		message = f"{MAGIC}\n\n{self}"
		parents = self.parents()
		for parent in parents:
			ctx.find_commit(parent)
		oid = ctx.create_commit(message, ctx.empty_tree(), parents)

		ctx.ensure_reflog(REFERENCE)
		if self.source is not None:
			if not ctx.compare_and_swap_reference(REFERENCE, oid, self.source, log_message):
				msg = f"metadata reference {REFERENCE} was modified concurrently"
				raise ConcurrencyError(msg)
		elif not ctx.create_reference(REFERENCE, oid, log_message):
			msg = f"metadata reference {REFERENCE} was created concurrently"
			raise ConcurrencyError(msg)

		logger.info("Committed metadata revision %d as %s (%s)", self.revision, oid, log_message)
		self.source = oid
		return oid

	def commit(self, ctx: PatchRepoContext, log_message: str) -> str:
		"""
		Persist the snapshot as a new metadata commit, clearing the undo pointer.

		Args:
			ctx: Repository context
			log_message: Reflog message naming the operation

		Returns:
			The new metadata commit id

		Raises:
			ConcurrencyError: If the metadata reference moved since the snapshot was loaded
		"""
		self.properties.remove(UNDO)
		return self._commit(ctx, log_message)

	def commit_with_undo(self, ctx: PatchRepoContext, log_message: str) -> str:
		"""Persist the snapshot, pointing the undo slot at the snapshot it replaces."""
		if self.source is not None:
			self.properties.set(UNDO, self.source)
		return self._commit(ctx, log_message)

	def undo(self, ctx: PatchRepoContext) -> Metadata | None:
		"""
		Load the snapshot the undo pointer refers to.

		The returned snapshot has its revision bumped and is not verified or
		persisted; the caller restores the branch tip and commits it.

		Returns:
			The previous snapshot, or None if there is nothing to undo
		"""
		undo_id = self.undo_id
		if undo_id is None:
			return None

		meta = Metadata.from_commit(ctx.find_commit(undo_id))
		# Revisions only move forward, even when undoing to an older snapshot
		meta.properties.set(REVISION, max(meta.revision + 1, self.revision))
		meta.source = self.source
		return meta
