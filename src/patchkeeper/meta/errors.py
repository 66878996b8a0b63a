"""Exceptions raised by the metadata engine."""


class PatchkeeperError(Exception):
	"""Base class for patchkeeper errors."""


class MetadataFormatError(PatchkeeperError):
	"""Raised when a metadata commit cannot be recognized or parsed."""


class MetadataPropertyError(MetadataFormatError):
	"""Raised when a property is accessed as the wrong kind or cannot be converted."""


class MetadataSyncError(PatchkeeperError):
	"""Raised when metadata does not match the ancestry of a tracked branch."""


class ConcurrencyError(PatchkeeperError):
	"""Raised when the metadata reference was moved by someone else."""


class PreconditionError(PatchkeeperError):
	"""Raised when an operation is invoked against a patch or branch in the wrong state."""
