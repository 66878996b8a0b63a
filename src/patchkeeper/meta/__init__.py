"""Patch-queue metadata engine."""

from patchkeeper.meta.branch import Branch, Branches
from patchkeeper.meta.errors import (
	ConcurrencyError,
	MetadataFormatError,
	MetadataPropertyError,
	MetadataSyncError,
	PatchkeeperError,
	PreconditionError,
)
from patchkeeper.meta.metadata import HIDDEN, MAGIC, REFERENCE, REVISION, UNDO, Metadata
from patchkeeper.meta.patches import Patches
from patchkeeper.meta.properties import Properties

__all__ = [
	"HIDDEN",
	"MAGIC",
	"REFERENCE",
	"REVISION",
	"UNDO",
	"Branch",
	"Branches",
	"ConcurrencyError",
	"Metadata",
	"MetadataFormatError",
	"MetadataPropertyError",
	"MetadataSyncError",
	"Patches",
	"PatchkeeperError",
	"PreconditionError",
	"Properties",
]
