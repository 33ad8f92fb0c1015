from datetime import date, datetime, time
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from backend_fastapi.api.schemas import TaskOut
from core.domain.models.task import TaskPriority, TaskStatus

DESCRIPTION_TOO_SHORT = "Description must be at least 2 characters."
DUE_DATE_IN_PAST = "Due date cannot be in the past."

_MESSAGES = {
    ("description", "string_too_short"): DESCRIPTION_TOO_SHORT,
    ("description", "missing"): DESCRIPTION_TOO_SHORT,
    ("status", "enum"): "Select a valid status.",
    ("priority", "enum"): "Select a valid priority.",
    ("due_date", "date_from_datetime_parsing"): "Enter a valid date.",
    ("due_date", "value_error"): DUE_DATE_IN_PAST,
}


class TaskForm(BaseModel):
    """
    Formulario de alta/edicion. Se valida antes de llamar a la API.
    """

    description: str = Field(min_length=2)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.LOW
    due_date: date | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("due_date")
    @classmethod
    def _not_in_past(cls, value: date | None, info: ValidationInfo) -> date | None:
        # Al editar se puede conservar la fecha que ya tenia la tarea.
        context = info.context or {}
        if value is None or value == context.get("current_due_date"):
            return value
        if value < context.get("today", date.today()):
            raise ValueError(DUE_DATE_IN_PAST)
        return value

    def to_payload(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": (
                datetime.combine(self.due_date, time()).isoformat() if self.due_date else None
            ),
        }


def default_values() -> dict[str, str]:
    return {
        "description": "",
        "status": TaskStatus.TODO.value,
        "priority": TaskPriority.LOW.value,
        "due_date": "",
    }


def values_from_task(task: TaskOut) -> dict[str, str]:
    return {
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "due_date": task.due_date.date().isoformat() if task.due_date else "",
    }


def validate_task_form(
    data: Mapping[str, Any],
    current_due_date: date | None = None,
    today: date | None = None,
) -> tuple[TaskForm | None, dict[str, str]]:
    """
    Retorna (form, {}) si es valido, o (None, errores por campo).

    Args:
        current_due_date: fecha que ya tenia la tarea editada; se acepta aunque
                          este en el pasado.
        today:            dia de referencia (por defecto hoy).
    """
    context = {"current_due_date": current_due_date, "today": today or date.today()}
    try:
        return TaskForm.model_validate(dict(data), context=context), {}
    except ValidationError as e:
        errors: dict[str, str] = {}
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else "__all__"
            message = _MESSAGES.get((name, error["type"]), error["msg"])
            errors.setdefault(name, message)
        return None, errors
