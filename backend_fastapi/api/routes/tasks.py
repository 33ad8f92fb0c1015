from enum import Enum
from typing import TypeVar
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse

from backend_fastapi.api.deps import (
    create_task_use_case,
    delete_task_use_case,
    get_task_use_case,
    list_tasks_use_case,
    update_task_use_case,
)
from backend_fastapi.api.schemas import TaskCreateIn, TaskListOut, TaskOut, TaskUpdateIn
from core.application.create_task import CreateTaskCommand, CreateTaskUseCase
from core.application.delete_task import DeleteTaskCommand, DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksCommand, ListTasksUseCase
from core.application.update_task import UpdateTaskCommand, UpdateTaskUseCase
from core.domain.exceptions import TaskNotFoundError
from core.domain.models.task import TaskPriority, TaskStatus

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

NOT_FOUND_TEXT = "No task with ID found"
E = TypeVar("E", bound=Enum)


def _not_found() -> PlainTextResponse:
    return PlainTextResponse(NOT_FOUND_TEXT, status_code=status.HTTP_404_NOT_FOUND)


def _parse_id(raw: str) -> UUID | None:
    # Un id que no es UUID no puede existir: mismo 404 que una fila ausente.
    try:
        return UUID(raw)
    except ValueError:
        return None


def parse_csv(raw: str | None, enum_cls: type[E], name: str) -> tuple[E, ...]:
    """
    Convierte "Low,Critical" en una tupla de miembros del enum.

    Vacio o "all" significa sin filtro.
    """
    if not raw:
        return ()
    values = [value.strip() for value in raw.split(",")]
    members = []
    for value in values:
        if not value or value == "all":
            continue
        try:
            members.append(enum_cls(value))
        except ValueError:
            raise HTTPException(
                status_code=422,
                detail=f"Invalid {name} value: {value}",
            ) from None
    return tuple(dict.fromkeys(members))


@router.get(
    "",
    response_model=TaskListOut,
    summary="Listar tareas con filtros, paginacion y conteos",
)
def list_tasks(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: str = "",
    priority: str | None = None,
    status_filter: str | None = Query(None, alias="status"),
    use_case: ListTasksUseCase = Depends(list_tasks_use_case),
) -> TaskListOut:
    """
    Retorna una pagina de tareas y los agregados del tablero.

    - **search**: texto contenido en la descripcion (sin distinguir mayusculas).
    - **priority**: prioridades separadas por coma.
    - **status**: estados separados por coma.
    """
    listing = use_case.execute(
        ListTasksCommand(
            page=page,
            limit=limit,
            search=search,
            priorities=parse_csv(priority, TaskPriority, "priority"),
            statuses=parse_csv(status_filter, TaskStatus, "status"),
        )
    )
    return TaskListOut.from_domain(listing)


@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Crear una nueva tarea",
)
def create_task(
    body: TaskCreateIn,
    use_case: CreateTaskUseCase = Depends(create_task_use_case),
) -> TaskOut:
    """
    Crea una nueva tarea.

    - **description**: texto de la tarea.
    - **status**: estado inicial (por defecto Todo).
    - **priority**: prioridad (por defecto Low).
    - **dueDate**: fecha limite opcional.
    """
    task = use_case.execute(
        CreateTaskCommand(
            description=body.description,
            status=body.status,
            priority=body.priority,
            due_date=body.due_date,
        )
    )
    return TaskOut.from_domain(task)


@router.get(
    "/{task_id}",
    response_model=TaskOut,
    responses={404: {"content": {"text/plain": {}}}},
    summary="Obtener una tarea",
)
def get_task(
    task_id: str,
    use_case: GetTaskUseCase = Depends(get_task_use_case),
):
    task_uuid = _parse_id(task_id)
    if task_uuid is None:
        return _not_found()
    try:
        return TaskOut.from_domain(use_case.execute(task_uuid))
    except TaskNotFoundError:
        return _not_found()


@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    responses={404: {"content": {"text/plain": {}}}},
    summary="Editar parcialmente una tarea",
)
def update_task(
    task_id: str,
    body: TaskUpdateIn,
    use_case: UpdateTaskUseCase = Depends(update_task_use_case),
):
    """
    Modifica solo los campos enviados.

    - **task_id**: UUID de la tarea a modificar.
    """
    task_uuid = _parse_id(task_id)
    if task_uuid is None:
        return _not_found()
    try:
        task = use_case.execute(task_uuid, UpdateTaskCommand(changes=body.changes()))
    except TaskNotFoundError:
        return _not_found()
    return TaskOut.from_domain(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"content": {"text/plain": {}}}},
    summary="Eliminar una tarea",
)
def delete_task(
    task_id: str,
    use_case: DeleteTaskUseCase = Depends(delete_task_use_case),
) -> Response:
    """
    Elimina una tarea del sistema.

    - **task_id**: UUID de la tarea a eliminar.
    """
    task_uuid = _parse_id(task_id)
    if task_uuid is None:
        return _not_found()
    try:
        use_case.execute(DeleteTaskCommand(id=task_uuid))
    except TaskNotFoundError:
        return _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
