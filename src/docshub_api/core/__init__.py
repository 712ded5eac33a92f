"""Core building blocks shared by DocsHub features."""
