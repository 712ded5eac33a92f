"""Feature modules exposing the DocsHub HTTP API."""
