"""Workspace policies, member policies, and access decisions."""
