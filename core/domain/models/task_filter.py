from dataclasses import dataclass, field, replace
from typing import Iterable

from core.domain.models.task import TaskPriority, TaskStatus


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """
    Filtro tipado para las consultas de tareas.

    Un campo vacio (None o conjunto vacio) no impone restriccion.
    """

    search: str | None = None
    priorities: frozenset[TaskPriority] = field(default_factory=frozenset)
    statuses: frozenset[TaskStatus] = field(default_factory=frozenset)

    def without_status(self) -> "TaskFilter":
        return replace(self, statuses=frozenset())

    def is_empty(self) -> bool:
        return self.search is None and not self.priorities and not self.statuses

    def matches(self, description: str, priority: TaskPriority, status: TaskStatus) -> bool:
        """Evalua el filtro en memoria (mismas reglas que la consulta SQL)."""
        if self.search is not None and self.search.casefold() not in description.casefold():
            return False
        if self.priorities and priority not in self.priorities:
            return False
        if self.statuses and status not in self.statuses:
            return False
        return True


def build_task_filter(
    search: str | None = None,
    priorities: Iterable[TaskPriority] = (),
    statuses: Iterable[TaskStatus] = (),
) -> TaskFilter:
    search = (search or "").strip()
    return TaskFilter(
        search=search or None,
        priorities=frozenset(priorities),
        statuses=frozenset(statuses),
    )
