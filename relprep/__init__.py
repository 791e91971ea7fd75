"""Release preparation for git repositories versioned by a version.json policy."""

__version__ = "0.1.0"
