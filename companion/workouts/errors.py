"""Session engine errors.

Every error is raised before any state change, so a rejected call leaves the
session exactly as it was. They signal caller-logic mistakes and are not
retryable.
"""


class SessionError(Exception):
    """Base exception for rejected session operations."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SessionFinishedError(SessionError):
    """Raised when operating on a session that already produced its log."""

    def __init__(self, plan_id: str):
        super().__init__(f"Session for plan {plan_id} is finished")


class InvalidSetIndexError(SessionError):
    """Raised when an exercise or set index is out of range."""

    def __init__(self, exercise_index: int, set_index: int):
        super().__init__(f"No set {set_index} for exercise {exercise_index}")


class InvalidSetFieldError(SessionError):
    """Raised when updating a field that is not a user-editable scalar."""

    def __init__(self, field: str):
        super().__init__(f"Field {field!r} cannot be updated")


class InvalidSetValueError(SessionError):
    """Raised when a value does not match the field's type."""

    def __init__(self, field: str, value: object):
        super().__init__(f"Invalid value {value!r} for field {field!r}")


class SetAlreadyCompletedError(SessionError):
    """Raised when completing or editing a set that is already completed."""

    def __init__(self, exercise_index: int, set_index: int):
        super().__init__(f"Set {set_index} of exercise {exercise_index} is already completed")


class SetGatedError(SessionError):
    """Raised when completing a set before the preceding set."""

    def __init__(self, exercise_index: int, set_index: int):
        super().__init__(f"Set {set_index} of exercise {exercise_index} requires set {set_index - 1} to be completed first")


class ExerciseNotActiveError(SessionError):
    """Raised when completing a set of an exercise that does not have focus."""

    def __init__(self, exercise_index: int, current_index: int):
        super().__init__(f"Exercise {exercise_index} is not active (current exercise is {current_index})")
