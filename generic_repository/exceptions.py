"""
Custom exceptions for the repository layer.

Only caller-usage errors are defined here. Errors raised by SQLAlchemy
(integrity, connectivity, stale data) reach the caller unchanged.
"""

class RepositoryError(Exception):
    """Base exception for repository usage errors."""
    pass

class InvalidArgumentError(RepositoryError, ValueError):
    """Raised when a required argument is missing or unusable."""

    def __init__(self, argument: str, message: str = None):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' is required")

class InvalidIncludePathError(InvalidArgumentError):
    """Raised when an include path does not name a chain of relationships."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__("include", f"Invalid include path '{path}': {reason}")
