"""CLI command modules for mergedown."""

from mergedown.command.merge import MergeCommand

__all__ = ["MergeCommand"]
