"""
Error types raised by the condition tree core.

All of these are local, recoverable conditions. Builder operations validate
before producing a new tree, so a caller that catches one of these keeps the
tree it already had.
"""

from typing import Sequence


class ConditionTreeError(Exception):
    """Base class for all condition tree errors."""
    pass


class PathNotFoundError(ConditionTreeError, LookupError):
    """Raised when a group path does not resolve to an existing group."""

    def __init__(self, path: Sequence[int], message: str = ""):
        self.path = tuple(path)
        super().__init__(message or f"No group at path {list(self.path)}")


class IndexOutOfRangeError(ConditionTreeError, IndexError):
    """Raised when a rule or group index is invalid within a resolved group."""

    def __init__(self, kind: str, index, size: int, path: Sequence[int] = ()):
        self.kind = kind
        self.index = index
        self.size = size
        self.path = tuple(path)
        super().__init__(
            f"{kind} index {index!r} out of range for group at {list(self.path)} "
            f"({size} {kind}s)"
        )


class InvalidModeError(ConditionTreeError, ValueError):
    """Raised when a group mode is not ALL or ANY."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Invalid group mode {mode!r}, expected 'ALL' or 'ANY'")


class InvalidFieldError(ConditionTreeError, ValueError):
    """Raised when updating a rule field that does not exist."""

    def __init__(self, field: str, allowed: Sequence[str]):
        self.field = field
        super().__init__(f"Unknown rule field {field!r}, expected one of {', '.join(allowed)}")


class MalformedDocumentError(ConditionTreeError, ValueError):
    """Raised when a condition document cannot be parsed into a tree."""
    pass


class InvalidFieldValueError(ConditionTreeError, TypeError):
    """Raised when a rule field is given a value of the wrong type."""

    def __init__(self, field: str, value, expected: str):
        self.field = field
        self.value = value
        super().__init__(f"Rule field {field!r} expects {expected}, got {type(value).__name__} {value!r}")
