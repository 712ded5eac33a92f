"""Shared helpers for the DocsHub API (logging, errors, schemas, ids)."""
