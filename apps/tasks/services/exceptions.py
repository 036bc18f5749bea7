"""Domain exceptions for tasks app."""

from apps.core.exceptions import NotFoundError, ValidationError


class TaskNotFoundError(NotFoundError):
    """Task does not exist."""
    default_detail = 'Task not found.'
    default_code = 'task_not_found'


class DuplicateTaskNameError(ValidationError):
    """Another task already uses this name."""
    default_detail = 'A task with this name already exists.'
    default_code = 'duplicate_task_name'


class TaskInUseError(ValidationError):
    """Task is referenced by receipt books or receipts."""
    default_detail = 'Task is used by receipt books or receipts and cannot be deleted.'
    default_code = 'task_in_use'
