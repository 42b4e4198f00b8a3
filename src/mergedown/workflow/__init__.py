"""Merge-down workflow graph."""
