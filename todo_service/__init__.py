"""Todo Service - per-user task tracking with token authentication."""

__version__ = "1.0.0"
