"""patchkeeper: per-branch patch queues stored inside the git repository."""

__version__ = "0.1.0"
