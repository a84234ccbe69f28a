"""Exception hierarchy for dsgit.

Every core operation raises one of these instead of recovering silently.
The CLI layer catches ``DsgitError`` and turns it into an error message.
"""

from typing import Optional


class DsgitError(Exception):
    """Base class for all dsgit errors."""


class RepositoryError(DsgitError):
    """Raised when a repository is missing or already exists."""


class NotFound(DsgitError):
    """Raised when an object or ref does not exist."""


class TypeMismatch(DsgitError):
    """Raised when a stored object has a different kind than requested."""

    def __init__(self, oid: str, expected: str, actual: str):
        super().__init__(f"Object {oid} is a {actual}, expected {expected}")
        self.oid = oid
        self.expected = expected
        self.actual = actual


class Corrupt(DsgitError):
    """Raised when a tree, commit or object file is malformed."""


class IOFailure(DsgitError):
    """
    Raised when the filesystem fails underneath an operation.

    The original ``OSError`` is kept as ``__cause__`` and in ``error``.
    """

    def __init__(self, message: str, path: Optional[str] = None,
                 error: Optional[OSError] = None):
        if error is not None and error.strerror:
            message = f"{message}: {error.strerror}"
        super().__init__(message)
        self.path = path
        self.error = error


class NameResolutionFailure(DsgitError):
    """Raised when a name matches no ref and is not a raw object id."""

    def __init__(self, name: str):
        super().__init__(f"Not a valid object name: {name}")
        self.name = name


class CycleDetected(DsgitError):
    """Raised when a chain of symbolic refs loops back on itself."""

    def __init__(self, chain: list):
        super().__init__("Symbolic ref cycle: " + " -> ".join(chain))
        self.chain = chain


class ConfigError(DsgitError, ValueError):
    """Raised when a configuration value cannot be parsed."""
