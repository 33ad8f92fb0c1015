"""
Controlador del tablero de tareas.

Mantiene el `ViewState` de un usuario y traduce cada accion de la UI en
llamadas a la API. Politica de refresco:

- cambio de busqueda o de filtros, abrir alta/edicion o cerrar un dialogo
  → se vuelve a pedir la pagina 1;
- paginacion → la pagina pedida;
- alta exitosa → pagina 1; edicion, borrado o check de estado → pagina actual.

Cada fetch lleva un numero de generacion; una respuesta que llega despues
de que se lanzo otro fetch se descarta.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Mapping

from core.domain.models.task import TaskPriority, TaskStatus
from frontend.api_client import ApiError, TaskApiClient
from frontend.forms import default_values, validate_task_form, values_from_task
from frontend.state import (
    Adding,
    Browsing,
    ConfirmingDelete,
    DialogMode,
    Editing,
    Filters,
    Toast,
    ViewState,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 5


class TaskBoard:
    def __init__(self, api: TaskApiClient, page_size: int = PAGE_SIZE) -> None:
        self._api = api
        self._page_size = page_size
        self._lock = threading.Lock()
        self._state = ViewState()
        self._toasts: list[Toast] = []
        self._generation = 0

    @property
    def state(self) -> ViewState:
        with self._lock:
            return self._state

    @property
    def page_size(self) -> int:
        return self._page_size

    def close(self) -> None:
        self._api.close()

    def pop_toasts(self) -> list[Toast]:
        """Las notificaciones se muestran una sola vez."""
        with self._lock:
            toasts, self._toasts = self._toasts, []
        return toasts

    def _notify(self, description: str, error: bool = False) -> None:
        toast = (
            Toast("Error", description, variant="destructive")
            if error
            else Toast("Success", description)
        )
        with self._lock:
            self._toasts.append(toast)

    def _set_mode(self, mode: DialogMode) -> None:
        with self._lock:
            self._state = replace(self._state, mode=mode)

    # ── Fetch ────────────────────────────────────────────────────────────────

    def refresh(self, page: int = 1) -> bool:
        """
        Pide `page` con los filtros actuales.

        Returns:
            True si la respuesta se aplico al estado.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            filters = self._state.filters

        try:
            listing = self._api.list_tasks(
                page=page,
                limit=self._page_size,
                search=filters.search,
                priorities=filters.priorities,
                statuses=filters.statuses,
            )
        except ApiError as e:
            logger.error(f"Error cargando tareas: {e}")
            self._notify("Failed to fetch tasks", error=True)
            return False

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Respuesta obsoleta descartada (gen {generation})")
                return False
            self._state = replace(self._state, listing=listing)
        return True

    # ── Filtros y paginacion ─────────────────────────────────────────────────

    def _change_filters(self, change: Callable[[Filters], Filters]) -> None:
        with self._lock:
            self._state = replace(self._state, filters=change(self._state.filters))
        self.refresh(1)

    def set_search(self, search: str) -> None:
        self._change_filters(lambda f: f.with_search(search))

    def toggle_priority(self, priority: TaskPriority) -> None:
        self._change_filters(lambda f: f.toggle_priority(priority))

    def toggle_status(self, status: TaskStatus) -> None:
        self._change_filters(lambda f: f.toggle_status(status))

    def reset_filters(self) -> None:
        self._change_filters(lambda f: Filters())

    def go_to_page(self, page: int) -> None:
        page = max(page, 1)
        state = self.state
        if state.listing is not None:
            page = min(page, max(state.total_pages, 1))
        self.refresh(page)

    # ── Dialogos ─────────────────────────────────────────────────────────────

    def open_add(self) -> None:
        self._set_mode(Adding(values=default_values()))
        self.refresh(1)

    def submit_add(self, data: Mapping[str, Any]) -> bool:
        form, errors = validate_task_form(data)
        if form is None:
            self._set_mode(Adding(values=dict(data), errors=errors))
            return False

        try:
            self._api.create_task(form.to_payload())
        except ApiError as e:
            logger.error(f"Error creando tarea: {e}")
            self._set_mode(Adding(values=dict(data)))
            self._notify("Failed to add task", error=True)
            return False

        self._notify("Task added successfully")
        self._set_mode(Browsing())
        self.refresh(1)
        return True

    def _lookup(self, task_id: str):
        task = self.state.find_task(task_id)
        if task is not None:
            return task
        try:
            return self._api.get_task(task_id)
        except ApiError as e:
            logger.warning(f"No se pudo cargar la tarea {task_id}: {e}")
            self._notify("Failed to load task", error=True)
            return None

    def open_edit(self, task_id: str) -> bool:
        task = self._lookup(task_id)
        if task is None:
            return False
        self._set_mode(Editing(task=task, values=values_from_task(task)))
        self.refresh(1)
        return True

    def submit_edit(self, data: Mapping[str, Any]) -> bool:
        mode = self.state.mode
        if not isinstance(mode, Editing):
            return False

        current = mode.task.due_date.date() if mode.task.due_date else None
        form, errors = validate_task_form(data, current_due_date=current)
        if form is None:
            self._set_mode(Editing(task=mode.task, values=dict(data), errors=errors))
            return False

        try:
            self._api.update_task(mode.task.id, form.to_payload())
        except ApiError as e:
            logger.error(f"Error actualizando tarea {mode.task.id}: {e}")
            self._set_mode(Editing(task=mode.task, values=dict(data)))
            self._notify("Failed to update task", error=True)
            return False

        self._notify("Task updated successfully")
        self._set_mode(Browsing())
        self.refresh(self.state.current_page)
        return True

    def close_dialog(self) -> None:
        previous = self.state.mode
        self._set_mode(Browsing())
        if isinstance(previous, (Adding, Editing)):
            self.refresh(1)

    def request_delete(self, task_id: str) -> bool:
        task = self._lookup(task_id)
        if task is None:
            return False
        self._set_mode(ConfirmingDelete(task=task))
        return True

    def confirm_delete(self) -> bool:
        mode = self.state.mode
        if not isinstance(mode, ConfirmingDelete):
            return False

        try:
            self._api.delete_task(mode.task.id)
        except ApiError as e:
            logger.error(f"Error borrando tarea {mode.task.id}: {e}")
            self._notify("Failed to delete task", error=True)
            return False
        finally:
            self._set_mode(Browsing())

        self._notify("Task deleted successfully")
        self._refresh_current_page()
        return True

    def toggle_done(self, task_id: str, done: bool) -> bool:
        status = TaskStatus.DONE if done else TaskStatus.TODO
        try:
            self._api.update_task(task_id, {"status": status.value})
        except ApiError as e:
            logger.error(f"Error cambiando estado de {task_id}: {e}")
            self._notify("Failed to update task status", error=True)
            return False

        self._notify("Task status updated successfully")
        self._refresh_current_page()
        return True

    def _refresh_current_page(self) -> None:
        self.refresh(self.state.current_page)
        # Si se borro la ultima fila de la ultima pagina, retroceder.
        state = self.state
        if state.listing and not state.tasks and state.total_pages and state.current_page > state.total_pages:
            self.refresh(state.total_pages)
