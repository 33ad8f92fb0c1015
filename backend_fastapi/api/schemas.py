from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from core.application.list_tasks import TaskListing
from core.domain.models.task import Task, TaskPriority, TaskStatus


class TaskOut(BaseModel):
    """
    Representacion JSON de una tarea.
    """

    id: UUID
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = Field(default=None, alias="dueDate")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, task: Task) -> "TaskOut":
        return cls(
            id=task.id,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            created_at=task.created_at,
        )


class TaskCreateIn(BaseModel):
    description: str = Field(min_length=1)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.LOW
    due_date: datetime | None = Field(default=None, alias="dueDate")

    model_config = {"populate_by_name": True, "extra": "forbid"}


class TaskUpdateIn(BaseModel):
    """
    Cuerpo de un PATCH: cualquier subconjunto de los campos editables.
    """

    description: str | None = Field(default=None, min_length=1)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = Field(default=None, alias="dueDate")

    model_config = {"populate_by_name": True, "extra": "forbid"}

    @model_validator(mode="after")
    def _no_null_required_fields(self) -> "TaskUpdateIn":
        for name in ("description", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskListOut(BaseModel):
    tasks: list[TaskOut]
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_count: int = Field(alias="totalCount")
    total_tasks: int = Field(alias="totalTasks")
    priority_counts: dict[str, int] = Field(alias="priorityCounts")
    status_counts: dict[str, int] = Field(alias="statusCounts")
    priority_status_counts: dict[str, dict[str, int]] = Field(alias="priorityStatusCounts")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, listing: TaskListing) -> "TaskListOut":
        return cls(
            tasks=[TaskOut.from_domain(task) for task in listing.tasks],
            current_page=listing.current_page,
            total_pages=listing.total_pages,
            total_count=listing.total_count,
            total_tasks=listing.total_tasks,
            priority_counts={p.value: n for p, n in listing.priority_counts.items()},
            status_counts={s.value: n for s, n in listing.status_counts.items()},
            priority_status_counts={
                p.value: {s.value: n for s, n in by_status.items()}
                for p, by_status in listing.priority_status_counts.items()
            },
        )
