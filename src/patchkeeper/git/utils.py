"""Git primitives for patchkeeper, implemented with pygit2."""

from __future__ import annotations

import logging
from pathlib import Path

import pygit2
from pygit2 import Commit, Signature, discover_repository
from pygit2.enums import FileStatus, RepositoryState, ResetMode
from pygit2.repository import Repository

logger = logging.getLogger(__name__)

HEAD = "HEAD"
BRANCH_PREFIX = "refs/heads/"

UNREFRESHED_STATUS = (
	FileStatus.INDEX_NEW
	| FileStatus.INDEX_MODIFIED
	| FileStatus.INDEX_DELETED
	| FileStatus.INDEX_RENAMED
	| FileStatus.INDEX_TYPECHANGE
	| FileStatus.WT_MODIFIED
	| FileStatus.WT_DELETED
	| FileStatus.WT_TYPECHANGE
	| FileStatus.WT_RENAMED
	| FileStatus.CONFLICTED
)


class GitError(Exception):
	"""Custom exception for Git-related errors."""


def short_id(commit: Commit) -> str:
	"""Return the abbreviated id of ``commit``."""
	return str(commit.short_id)


def summary(commit: Commit) -> str:
	"""Return the first line of the commit message."""
	return commit.message.split("\n", 1)[0].strip()


def body(commit: Commit) -> str:
	"""Return the commit message after the summary line, without leading blank lines."""
	parts = commit.message.split("\n", 1)
	return parts[1].lstrip("\n") if len(parts) > 1 else ""


def refresh_signature(signature: Signature) -> Signature:
	"""Return a copy of ``signature`` stamped with the current time."""
	return Signature(signature.name or "<unknown>", signature.email or "<unknown>")


class PatchRepoContext:
	"""Repository handle exposing the primitives the patch engine builds on."""

	def __init__(self, repo: Repository) -> None:
		"""Wrap an opened pygit2 repository."""
		self.repo = repo

	@classmethod
	def get_repo_root(cls, path: Path | None = None) -> Path:
		"""Get the git directory of the repository containing ``path``."""
		git_dir = discover_repository(str(path or Path.cwd()))
		if git_dir is None:
			msg = "Not a git repository"
			logger.error(msg)
			raise GitError(msg)
		return Path(git_dir)

	@classmethod
	def discover(cls, path: Path | None = None) -> PatchRepoContext:
		"""Open the repository containing ``path`` (defaults to the current directory)."""
		return cls(Repository(str(cls.get_repo_root(path))))

	@classmethod
	def initialize(cls, path: Path, default_branch: str) -> PatchRepoContext:
		"""
		Create a repository at ``path``, or open the one already there.

		The initial branch is taken from git's ``init.defaultBranch`` when set,
		otherwise ``default_branch``.
		"""
		if (path / ".git").exists():
			logger.info("Opening existing repository at %s", path)
			return cls(Repository(str(path)))

		initial_head = default_branch
		try:
			initial_head = pygit2.Config.get_global_config()["init.defaultBranch"]
		except (OSError, KeyError, pygit2.GitError):
			logger.debug("No init.defaultBranch configured, using '%s'", default_branch)

		path.mkdir(parents=True, exist_ok=True)
		repo = pygit2.init_repository(str(path), bare=False, initial_head=initial_head)
		logger.info("Initialized repository at %s with branch '%s'", path, initial_head)
		return cls(repo)

	# --- Identity ---

	def signature(self) -> Signature:
		"""
		Return the configured user signature, stamped now.

		Falls back to the identity in patchkeeper's configuration when git has
		no ``user.name``/``user.email``.
		"""
		try:
			return self.repo.default_signature
		except (KeyError, pygit2.GitError):
			from patchkeeper.config import ConfigLoader  # Local import to avoid cycles

			identity = ConfigLoader.get_instance().get.identity
			logger.debug("Using configured fallback identity %s <%s>", identity.name, identity.email)
			return Signature(identity.name, identity.email)

	# --- HEAD and branches ---

	def head_name(self) -> str:
		"""
		Return the short name of the branch HEAD points to.

		Works on an unborn branch too.

		Raises:
			GitError: If HEAD is detached
		"""
		target = self.repo.lookup_reference(HEAD).target
		if isinstance(target, str) and target.startswith(BRANCH_PREFIX):
			return target[len(BRANCH_PREFIX) :]
		msg = "'HEAD' is not a branch"
		raise GitError(msg)

	def head_commit(self) -> Commit | None:
		"""Return the commit HEAD points to, or None on an unborn branch."""
		if self.repo.head_is_unborn:
			return None
		return self.repo.head.peel(Commit)

	def require_head_commit(self) -> Commit:
		"""
		Return the commit HEAD points to.

		Raises:
			GitError: On an unborn branch
		"""
		head = self.head_commit()
		if head is None:
			msg = "'HEAD' does not point to a commit"
			raise GitError(msg)
		return head

	def branch_tip(self, name: str) -> Commit | None:
		"""Return the tip of local branch ``name``, or None if it does not exist."""
		branch = self.repo.branches.local.get(name)
		if branch is None:
			return None
		return branch.peel(Commit)

	def branch_exists(self, name: str) -> bool:
		"""Return True if local branch ``name`` exists."""
		return self.repo.branches.local.get(name) is not None

	def branch_names(self, *, remote: bool = False) -> list[str]:
		"""Return local (or remote) branch names."""
		branches = self.repo.branches.remote if remote else self.repo.branches.local
		return sorted(branches)

	def is_head_branch(self, name: str) -> bool:
		"""Return True if ``name`` is the branch HEAD points to."""
		try:
			return self.head_name() == name
		except GitError:
			return False

	def create_branch(self, name: str) -> None:
		"""Create local branch ``name`` at the current HEAD commit and check it out."""
		head = self.require_head_commit()
		try:
			self.repo.branches.local.create(name, head)
		except (pygit2.GitError, ValueError) as e:
			msg = f"Failed to create branch '{name}': {e}"
			raise GitError(msg) from e
		logger.info("Branch '%s' created from '%s'.", name, head.id)
		self.checkout_branch(name)

	def checkout_branch(self, name: str) -> None:
		"""Check out existing local branch ``name``."""
		try:
			reference = self.repo.lookup_reference(f"{BRANCH_PREFIX}{name}")
			self.repo.checkout(reference)
		except (pygit2.GitError, KeyError) as e:
			msg = f"Failed to checkout branch '{name}': {e}"
			raise GitError(msg) from e
		logger.info("Checked out branch '%s'.", name)

	def rename_branch(self, old_name: str, new_name: str) -> None:
		"""Rename local branch ``old_name`` to ``new_name``."""
		branch = self.repo.branches.local.get(old_name)
		if branch is None:
			msg = f"branch '{old_name}' not found"
			raise GitError(msg)
		try:
			branch.rename(new_name, False)
		except (pygit2.GitError, ValueError) as e:
			msg = f"Failed to rename branch '{old_name}': {e}"
			raise GitError(msg) from e

	def delete_branch(self, name: str) -> None:
		"""Delete local branch ``name``."""
		branch = self.repo.branches.local.get(name)
		if branch is None:
			msg = f"branch '{name}' not found"
			raise GitError(msg)
		branch.delete()

	# --- Commits ---

	def find_commit(self, commit_id: str) -> Commit:
		"""
		Look up a commit by full id.

		Raises:
			GitError: If no such commit exists
		"""
		try:
			obj = self.repo[commit_id]
		except (KeyError, ValueError) as e:
			msg = f"commit {commit_id} not found"
			raise GitError(msg) from e
		if not isinstance(obj, Commit):
			msg = f"object {commit_id} is not a commit"
			raise GitError(msg)
		return obj

	def find_commits(self, commit_ids: list[str]) -> list[Commit]:
		"""Look up several commits by full id, preserving order."""
		return [self.find_commit(commit_id) for commit_id in commit_ids]

	def find_commit_by_revspec(self, revspec: str) -> Commit:
		"""
		Resolve a revision expression (``HEAD~2``, a branch name, an id) to a commit.

		Raises:
			GitError: If the expression does not resolve to a commit
		"""
		try:
			return self.repo.revparse_single(revspec).peel(Commit)
		except (KeyError, ValueError, pygit2.GitError) as e:
			msg = f"revspec '{revspec}' not found"
			raise GitError(msg) from e

	def find_commits_by_revspecs(self, revspecs: list[str]) -> list[Commit]:
		"""Resolve several revision expressions, preserving order."""
		return [self.find_commit_by_revspec(revspec) for revspec in revspecs]

	def lookup_reference_commit(self, name: str) -> Commit | None:
		"""Return the commit reference ``name`` points to, or None if it does not exist."""
		reference = self.repo.references.get(name)
		if reference is None:
			return None
		return reference.peel(Commit)

	def empty_tree(self) -> pygit2.Oid:
		"""Write and return the id of the empty tree."""
		return self.repo.TreeBuilder().write()

	def create_commit(
		self,
		message: str,
		tree: pygit2.Oid,
		parents: list[str],
		*,
		update_ref: str | None = None,
		author: Signature | None = None,
		committer: Signature | None = None,
	) -> str:
		"""
		Create a commit with an explicit parent list.

		Args:
			message: Full commit message
			tree: Tree id
			parents: Parent commit ids, in order
			update_ref: Reference to move to the new commit (e.g. ``HEAD``)
			author: Author signature (defaults to :meth:`signature`)
			committer: Committer signature (defaults to ``author``)

		Returns:
			The new commit id
		"""
		author = author or self.signature()
		committer = committer or author
		oid = self.repo.create_commit(
			update_ref,
			author,
			committer,
			message,
			tree,
			[pygit2.Oid(hex=parent) for parent in parents],
		)
		return str(oid)

	def amend_head(
		self,
		*,
		author: Signature | None = None,
		committer: Signature | None = None,
	) -> str:
		"""Amend the HEAD commit with the tree of the current index; return the new id."""
		head = self.require_head_commit()
		index = self.repo.index
		tree = index.write_tree()
		oid = self.repo.amend_commit(head, HEAD, author=author, committer=committer, tree=tree)
		index.write()
		logger.debug("Amended %s into %s", head.id, oid)
		return str(oid)

	def reset_hard(self, commit: Commit) -> None:
		"""Point the current branch at ``commit`` and reset index and working tree."""
		self.repo.reset(commit.id, ResetMode.HARD)

	# --- Index ---

	def stage_tracked(self) -> None:
		"""Stage modifications and deletions of tracked files, like ``git add -u``."""
		index = self.repo.index
		for path, flags in self.repo.status(untracked_files="no").items():
			if flags & FileStatus.CONFLICTED:
				continue
			if flags & FileStatus.WT_DELETED:
				index.remove(path)
			elif flags & (FileStatus.WT_MODIFIED | FileStatus.WT_TYPECHANGE):
				index.add(path)
		index.write()

	def write_index_tree(self) -> pygit2.Oid:
		"""Write the current index as a tree and return its id."""
		return self.repo.index.write_tree()

	def cherrypick(self, commit: Commit) -> list[str]:
		"""Apply ``commit`` to the index and working tree; return conflicting paths."""
		self.repo.cherrypick(commit.id)
		return self.unresolved_conflicts()

	def revert(self, commit: Commit) -> list[str]:
		"""Apply the inverse of ``commit`` to the index and working tree; return conflicting paths."""
		self.repo.revert(commit)
		return self.unresolved_conflicts()

	def cleanup_state(self) -> None:
		"""Clear pending cherry-pick or revert state."""
		self.repo.state_cleanup()

	def cherrypick_in_progress(self) -> bool:
		"""Return whether a cherry-pick is waiting to be committed."""
		return self.repo.state() == RepositoryState.CHERRYPICK

	def unresolved_conflicts(self) -> list[str]:
		"""Return the paths with unresolved conflicts in the index."""
		index = self.repo.index
		index.read(False)
		if index.conflicts is None:
			return []
		paths = []
		for ancestor, ours, theirs in index.conflicts:
			entry = ours or theirs or ancestor
			if entry is not None:
				paths.append(entry.path)
		return sorted(set(paths))

	def mark_resolved(self, paths: list[str]) -> None:
		"""Stage the working tree version of ``paths``, clearing their conflicts."""
		index = self.repo.index
		for path in paths:
			index.add(path)
		index.write()

	def ensure_no_unresolved(self) -> None:
		"""
		Check the index for conflicts.

		Raises:
			GitError: If there are unresolved conflicts
		"""
		if self.unresolved_conflicts():
			msg = "unresolved merge conflicts found"
			raise GitError(msg)

	def ensure_no_unrefreshed(self) -> None:
		"""
		Check for staged or unstaged changes to tracked files.

		Raises:
			GitError: If the index or working tree differ from HEAD
		"""
		if self.repo.head_is_unborn:
			return
		for flags in self.repo.status(untracked_files="no").values():
			if flags & UNREFRESHED_STATUS:
				msg = "unrefreshed changes found"
				raise GitError(msg)

	# --- References ---

	def ensure_reflog(self, name: str) -> None:
		"""Make sure reference ``name`` keeps a reflog."""
		log_path = Path(self.repo.path) / "logs" / name
		if not log_path.exists():
			log_path.parent.mkdir(parents=True, exist_ok=True)
			log_path.touch()

	def create_reference(self, name: str, target: str, message: str) -> bool:
		"""Create reference ``name``; return False if it already exists."""
		if self.repo.references.get(name) is not None:
			return False
		try:
			self.repo.create_reference_direct(name, pygit2.Oid(hex=target), False, message=message)
		except (pygit2.GitError, ValueError):
			return False
		return True

	def compare_and_swap_reference(self, name: str, target: str, expected: str, message: str) -> bool:
		"""
		Move reference ``name`` to ``target`` only if it still points at ``expected``.

		Returns:
			False if the reference is missing, points elsewhere, or was moved
			while updating
		"""
		reference = self.repo.references.get(name)
		if reference is None or str(reference.target) != expected:
			return False
		try:
			reference.set_target(pygit2.Oid(hex=target), message)
		except pygit2.GitError:
			logger.warning("Reference %s was modified during update", name)
			return False
		return True
