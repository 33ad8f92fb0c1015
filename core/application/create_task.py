import logging
from dataclasses import dataclass
from datetime import datetime

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CreateTaskCommand:
    description: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.LOW
    due_date: datetime | None = None


class CreateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: CreateTaskCommand) -> Task:
        task = self._repository.create(
            description=cmd.description,
            status=cmd.status,
            priority=cmd.priority,
            due_date=cmd.due_date,
        )
        logger.info(f"Tarea creada: {task.id} ({task.priority.value}/{task.status.value})")
        return task
