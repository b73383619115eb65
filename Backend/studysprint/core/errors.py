from typing import Optional


class GoalServiceError(Exception):
    """Base class for errors raised by the goals core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GoalValidationError(GoalServiceError, ValueError):
    """A query parameter or payload field failed validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class GoalNotFoundError(GoalServiceError):
    def __init__(self, goal_id=None):
        super().__init__("Goal not found.")
        self.goal_id = goal_id


class GoalImportError(GoalServiceError):
    """A record in an import batch could not be normalized. The whole batch is rejected."""

    def __init__(self, index: int, reason: str):
        super().__init__(f"Import item at index {index} is invalid: {reason}")
        self.index = index
        self.reason = reason


class PersistenceError(GoalServiceError):
    """Reading or writing the goals data file failed."""
