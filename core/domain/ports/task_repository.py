from abc import ABC, abstractmethod
from typing import Any, Iterable
from uuid import UUID

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_filter import TaskFilter


class TaskRepository(ABC):
    @abstractmethod
    def create(
        self,
        description: str,
        status: TaskStatus,
        priority: TaskPriority,
        due_date=None,
    ) -> Task:
        raise NotImplementedError

    @abstractmethod
    def create_many(self, tasks: Iterable[dict[str, Any]]) -> int:
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: UUID) -> Task | None:
        raise NotImplementedError

    @abstractmethod
    def update(self, task_id: UUID, changes: dict[str, Any]) -> Task | None:
        """Aplica `changes` y retorna la tarea actualizada, o None si no existe."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: UUID) -> bool:
        """Retorna False si no habia fila con ese id."""
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def find_page(self, task_filter: TaskFilter, offset: int, limit: int) -> list[Task]:
        """Tareas que cumplen el filtro, de la mas reciente a la mas antigua."""
        raise NotImplementedError

    @abstractmethod
    def count(self, task_filter: TaskFilter | None = None) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_by_priority(
        self, task_filter: TaskFilter | None = None
    ) -> dict[TaskPriority, int]:
        raise NotImplementedError

    @abstractmethod
    def count_by_status(
        self, task_filter: TaskFilter | None = None
    ) -> dict[TaskStatus, int]:
        raise NotImplementedError

    @abstractmethod
    def count_by_priority_and_status(
        self,
    ) -> dict[TaskPriority, dict[TaskStatus, int]]:
        raise NotImplementedError
