"""Workspaces and workspace membership."""
