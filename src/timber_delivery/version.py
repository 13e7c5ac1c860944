"""Package version, shared by packaging metadata and the User-Agent header."""

__version__ = "1.0.0"
