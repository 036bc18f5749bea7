"""Services for tasks business logic."""

from .exceptions import (
    TaskNotFoundError,
    DuplicateTaskNameError,
    TaskInUseError,
)
from .task_management import (
    get_task_by_id,
    create_task,
    update_task,
    delete_task,
)

__all__ = [
    # Exceptions
    'TaskNotFoundError',
    'DuplicateTaskNameError',
    'TaskInUseError',
    # Services
    'get_task_by_id',
    'create_task',
    'update_task',
    'delete_task',
]
