"""
Estado de la vista del tablero.

Todo lo que la pagina muestra sale de un unico `ViewState` inmutable; el
dialogo abierto es un valor de `DialogMode`, asi no hay combinaciones de
banderas imposibles (p.ej. editar y borrar a la vez).
"""

from dataclasses import dataclass, field, replace

from backend_fastapi.api.schemas import TaskListOut, TaskOut
from core.domain.models.task import TaskPriority, TaskStatus


def _toggle(selected: tuple, value) -> tuple:
    if value in selected:
        return tuple(item for item in selected if item != value)
    return selected + (value,)


@dataclass(frozen=True, slots=True)
class Filters:
    search: str = ""
    priorities: tuple[TaskPriority, ...] = ()
    statuses: tuple[TaskStatus, ...] = ()

    def is_filtering(self) -> bool:
        return bool(self.search or self.priorities or self.statuses)

    def with_search(self, search: str) -> "Filters":
        return replace(self, search=search)

    def toggle_priority(self, priority: TaskPriority) -> "Filters":
        return replace(self, priorities=_toggle(self.priorities, priority))

    def toggle_status(self, status: TaskStatus) -> "Filters":
        return replace(self, statuses=_toggle(self.statuses, status))


@dataclass(frozen=True, slots=True)
class Browsing:
    pass


@dataclass(frozen=True, slots=True)
class Adding:
    values: dict[str, str]
    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Editing:
    task: TaskOut
    values: dict[str, str]
    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ConfirmingDelete:
    task: TaskOut


DialogMode = Browsing | Adding | Editing | ConfirmingDelete


@dataclass(frozen=True, slots=True)
class Toast:
    title: str
    description: str
    variant: str = "default"


@dataclass(frozen=True, slots=True)
class ViewState:
    filters: Filters = field(default_factory=Filters)
    # Ultima respuesta aplicada; None hasta el primer fetch exitoso.
    listing: TaskListOut | None = None
    mode: DialogMode = field(default_factory=Browsing)

    @property
    def current_page(self) -> int:
        return self.listing.current_page if self.listing else 1

    @property
    def total_pages(self) -> int:
        return self.listing.total_pages if self.listing else 0

    @property
    def tasks(self) -> list[TaskOut]:
        return self.listing.tasks if self.listing else []

    def find_task(self, task_id: str) -> TaskOut | None:
        for task in self.tasks:
            if str(task.id) == str(task_id):
                return task
        return None


def page_window(current: int, total: int, max_visible: int = 5) -> list[int]:
    """
    Numeros de pagina a mostrar: arranca una antes de la actual y completa
    hasta `max_visible` si quedan paginas.
    """
    start = max(1, current - 1)
    end = min(total, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))
