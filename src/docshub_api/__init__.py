"""DocsHub API: workspace access control and signed document share links."""

__version__ = "0.1.0"
