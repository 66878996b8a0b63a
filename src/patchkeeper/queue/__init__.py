"""Patch-queue state machine: each operation moves commits between queues and commits metadata."""

from patchkeeper.queue.branches import (
	BranchEntry,
	branch_delete,
	branch_hide,
	branch_list,
	branch_new,
	branch_rename,
	branch_set,
	branch_unhide,
)
from patchkeeper.queue.delete import delete_next, delete_revspecs
from patchkeeper.queue.fold import fold_next, fold_revspecs
from patchkeeper.queue.hide import hide_all, hide_next, hide_revspecs, unhide_all, unhide_revspecs
from patchkeeper.queue.listing import BranchPatches, PatchEntry, PatchState, list_branch_patches
from patchkeeper.queue.new import init, new
from patchkeeper.queue.pop import pop_all, pop_finalized, pop_next, pop_revspec
from patchkeeper.queue.push import PushOp, push_all, push_backout, push_graft, push_move, push_next, push_revspec
from patchkeeper.queue.refresh import finalize, refresh, reset
from patchkeeper.queue.resolve import list_conflicts, resolve_all, resolve_paths, resolve_undo
from patchkeeper.queue.result import OperationResult, PatchAction

__all__ = [
	"BranchEntry",
	"BranchPatches",
	"OperationResult",
	"PatchAction",
	"PatchEntry",
	"PatchState",
	"PushOp",
	"branch_delete",
	"branch_hide",
	"branch_list",
	"branch_new",
	"branch_rename",
	"branch_set",
	"branch_unhide",
	"delete_next",
	"delete_revspecs",
	"finalize",
	"fold_next",
	"fold_revspecs",
	"hide_all",
	"hide_next",
	"hide_revspecs",
	"init",
	"list_branch_patches",
	"list_conflicts",
	"new",
	"pop_all",
	"pop_finalized",
	"pop_next",
	"pop_revspec",
	"push_all",
	"push_backout",
	"push_graft",
	"push_move",
	"push_next",
	"push_revspec",
	"refresh",
	"reset",
	"resolve_all",
	"resolve_paths",
	"resolve_undo",
	"unhide_all",
	"unhide_revspecs",
]
