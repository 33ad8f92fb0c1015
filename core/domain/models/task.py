from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class TaskStatus(Enum):
    TODO = "Todo"
    PROGRESS = "Progress"
    DONE = "Done"


class TaskPriority(Enum):
    MINOR = "Minor"
    LOW = "Low"
    MODERATE = "Moderate"
    IMPORTANT = "Important"
    CRITICAL = "Critical"


@dataclass(slots=True)
class Task:
    id: UUID
    description: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.LOW
    due_date: datetime | None = None
    created_at: datetime | None = None


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Campos que una actualizacion parcial puede tocar.
MUTABLE_FIELDS = frozenset({"description", "status", "priority", "due_date"})
