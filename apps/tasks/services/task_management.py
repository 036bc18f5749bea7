"""Task management service - CRUD for income categories."""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.db.models import ProtectedError

from apps.accounts.capabilities import Capability, ensure_can
from apps.accounts.models import User
from apps.tasks.models import Task
from .exceptions import TaskNotFoundError, DuplicateTaskNameError, TaskInUseError

logger = logging.getLogger(__name__)


def get_task_by_id(*, task_id: UUID) -> Task:
    """
    Get a task by ID.

    Raises:
        TaskNotFoundError: If task doesn't exist
    """
    try:
        return Task.objects.get(id=task_id)
    except (Task.DoesNotExist, DjangoValidationError):
        raise TaskNotFoundError(f"Task with ID {task_id} not found")


def create_task(*, actor: User, name: str, description: str = '') -> Task:
    """
    Create an income task.

    Raises:
        AuthorizationError: If actor is not manager/admin
        DuplicateTaskNameError: If the name is taken
    """
    ensure_can(actor, Capability.MANAGE_TASKS)

    try:
        with transaction.atomic():
            task = Task.objects.create(name=name, description=description)
    except IntegrityError:
        raise DuplicateTaskNameError()

    logger.info("Task %r created by %s", task.name, actor.username)
    return task


def update_task(*, actor: User, task_id: UUID, **fields) -> Task:
    """
    Update name and/or description of a task.

    Raises:
        AuthorizationError: If actor is not manager/admin
        TaskNotFoundError: If task doesn't exist
        DuplicateTaskNameError: If the new name is taken
    """
    ensure_can(actor, Capability.MANAGE_TASKS)

    task = get_task_by_id(task_id=task_id)
    for field in ('name', 'description'):
        if field in fields:
            setattr(task, field, fields[field])

    try:
        with transaction.atomic():
            task.save()
    except IntegrityError:
        raise DuplicateTaskNameError()

    return task


def delete_task(*, actor: User, task_id: UUID) -> None:
    """
    Delete a task that nothing references.

    Raises:
        AuthorizationError: If actor is not manager/admin
        TaskNotFoundError: If task doesn't exist
        TaskInUseError: If receipt books or receipts reference the task
    """
    ensure_can(actor, Capability.MANAGE_TASKS)

    task = get_task_by_id(task_id=task_id)
    try:
        with transaction.atomic():
            task.delete()
    except ProtectedError:
        raise TaskInUseError()

    logger.info("Task %r deleted by %s", task.name, actor.username)
