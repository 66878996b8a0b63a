"""Git utilities for patchkeeper."""

from patchkeeper.git.utils import HEAD, GitError, PatchRepoContext

__all__ = ["HEAD", "GitError", "PatchRepoContext"]
