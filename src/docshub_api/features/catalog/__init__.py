"""Read-only policy catalog routes."""
