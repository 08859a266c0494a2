"""
harvest/core/tasks/errors.py
Exceptions raised while building tasks.

These only surface during setup (catalog loading, factory registration).
Gameplay calls on the TaskManager log and return False instead.
"""


class TaskError(Exception):
    """Base class for task system errors."""
    pass


class TaskValidationError(TaskError, ValueError):
    """Raised when a task is constructed without a required identity field."""
    pass


class UnknownTaskKindError(TaskError, KeyError):
    """Raised when the factory is asked for a kind nobody registered."""

    def __init__(self, kind: str):
        super().__init__(kind)
        self.kind = kind

    def __str__(self) -> str:
        return f"Unknown task kind: {self.kind}"


class TaskTypeError(TaskError, TypeError):
    """Raised when a class registered with the factory lacks task capabilities."""
    pass
