"""Signed, expiring document share links."""
