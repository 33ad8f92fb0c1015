import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from core.domain.exceptions import TaskNotFoundError
from core.domain.models.task import MUTABLE_FIELDS, Task
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpdateTaskCommand:
    """
    Actualizacion parcial: solo se tocan las claves presentes en `changes`.

    `{"due_date": None}` borra la fecha; omitir la clave la deja igual.
    """

    changes: dict[str, Any] = field(default_factory=dict)


class UpdateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, task_id: UUID, cmd: UpdateTaskCommand) -> Task:
        unknown = set(cmd.changes) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Campos no editables: {', '.join(sorted(unknown))}")

        task = self._repository.update(task_id, cmd.changes)
        if task is None:
            logger.warning(f"Actualizacion de tarea inexistente: {task_id}")
            raise TaskNotFoundError(task_id)

        logger.info(f"Tarea {task_id} actualizada ({', '.join(sorted(cmd.changes)) or 'sin cambios'})")
        return task
