"""docagent: keeps a generated documentation.md in sync with repository sources."""

__version__ = "1.0.0"
