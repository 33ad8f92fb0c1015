"""
Cliente HTTP del tablero: habla con la API JSON de tareas.
"""

import logging
import os
from typing import Any, Iterable
from uuid import UUID

import httpx

from backend_fastapi.api.schemas import TaskListOut, TaskOut
from core.domain.models.task import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:8000"


class ApiError(Exception):
    """Fallo de transporte o respuesta no 2xx de la API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TaskApiClient:
    def __init__(self, base_url: str | None = None, http: httpx.Client | None = None) -> None:
        """
        Args:
            base_url: URL de la API; por defecto TASKS_API_URL.
            http:     Cliente httpx ya construido (en tests, un TestClient).
        """
        if http is None:
            http = httpx.Client(base_url=base_url or os.getenv("TASKS_API_URL", DEFAULT_API_URL))
        self._http = http

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Error de red en {method} {path}: {e}")
            raise ApiError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            logger.warning(f"{method} {path} respondio {response.status_code}")
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def list_tasks(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        priorities: Iterable[TaskPriority] = (),
        statuses: Iterable[TaskStatus] = (),
    ) -> TaskListOut:
        params: dict[str, Any] = {"page": page, "limit": limit, "search": search}
        priorities = [p.value for p in priorities]
        statuses = [s.value for s in statuses]
        if priorities:
            params["priority"] = ",".join(priorities)
        if statuses:
            params["status"] = ",".join(statuses)
        response = self._request("GET", "/api/tasks", params=params)
        return TaskListOut.model_validate(response.json())

    def get_task(self, task_id: UUID | str) -> TaskOut:
        response = self._request("GET", f"/api/tasks/{task_id}")
        return TaskOut.model_validate(response.json())

    def create_task(self, payload: dict[str, Any]) -> TaskOut:
        response = self._request("POST", "/api/tasks", json=payload)
        return TaskOut.model_validate(response.json())

    def update_task(self, task_id: UUID | str, payload: dict[str, Any]) -> TaskOut:
        response = self._request("PATCH", f"/api/tasks/{task_id}", json=payload)
        return TaskOut.model_validate(response.json())

    def delete_task(self, task_id: UUID | str) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    def close(self) -> None:
        self._http.close()
