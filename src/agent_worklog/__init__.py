"""Agent Work Log: a local, queryable log of completed agent work."""

__version__ = "0.1.0"

__all__ = ["__version__"]
