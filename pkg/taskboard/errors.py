"""
Exceptions raised by the task board package.

StatusMapper functions never raise; everything here comes from the drag
state machine, the persistence client or configuration loading.
"""
from typing import Optional


class TaskboardError(Exception):
    """Base class for all task board errors."""
    pass


class ConfigError(TaskboardError):
    """Raised when configuration is invalid or incomplete."""
    pass


class ReorderError(TaskboardError):
    """Raised when a drag gesture references something that does not exist."""
    pass


class DragStateError(ReorderError):
    """Raised when a drag operation is not allowed in the current state."""
    pass


class PersistenceError(TaskboardError):
    """Raised when the server rejects or fails to receive a position update."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
