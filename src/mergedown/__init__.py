"""mergedown - keep a branch merged down through the GitHub API."""

__version__ = "0.1.0"
