from datetime import datetime, timezone
from typing import Any, Iterable, List
from uuid import UUID

from peewee import fn

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_filter import TaskFilter
from core.domain.ports.task_repository import TaskRepository
from infrastructure.peewee.model.models import TaskModel
from infrastructure.peewee.session.db import db, is_sqlite


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _to_row(values: dict[str, Any]) -> dict[str, Any]:
    row = dict(values)
    for key in ("status", "priority"):
        if key in row and not isinstance(row[key], str):
            row[key] = row[key].value
    if "due_date" in row:
        row["due_date"] = _naive_utc(row["due_date"])
    return row


def _to_domain(model: TaskModel) -> Task:
    return Task(
        id=model.id,
        description=model.description,
        status=TaskStatus(model.status),
        priority=TaskPriority(model.priority),
        due_date=model.due_date,
        created_at=model.created_at,
    )


def _where(query, task_filter: TaskFilter | None, fold: bool = False):
    if task_filter is None:
        return query
    if task_filter.search is not None:
        if fold:
            # SQLite: se pliegan ambos lados con la funcion casefold registrada.
            column = fn.casefold(TaskModel.description)
            query = query.where(column.contains(task_filter.search.casefold()))
        else:
            # ILIKE en Postgres.
            query = query.where(TaskModel.description.contains(task_filter.search))
    if task_filter.priorities:
        query = query.where(TaskModel.priority.in_([p.value for p in task_filter.priorities]))
    if task_filter.statuses:
        query = query.where(TaskModel.status.in_([s.value for s in task_filter.statuses]))
    return query


class PeeweeTaskRepository(TaskRepository):
    def __init__(self, database=None):
        self._db = database if database is not None else db
        self._fold = is_sqlite(self._db)
        # Sin migraciones: la tabla se crea al instanciar el repositorio.
        self._db.connect(reuse_if_open=True)
        self._db.create_tables([TaskModel], safe=True)

    def _where(self, query, task_filter: TaskFilter | None):
        return _where(query, task_filter, fold=self._fold)

    def create(self, description, status, priority, due_date=None) -> Task:
        with self._db.atomic():
            model = TaskModel.create(
                **_to_row(
                    {
                        "description": description,
                        "status": status,
                        "priority": priority,
                        "due_date": due_date,
                    }
                )
            )
        # Releer para devolver los valores tal como quedaron guardados.
        return self.get(model.id)

    def create_many(self, tasks: Iterable[dict[str, Any]]) -> int:
        rows = [_to_row(task) for task in tasks]
        with self._db.atomic():
            for batch in range(0, len(rows), 100):
                TaskModel.insert_many(rows[batch:batch + 100]).execute()
        return len(rows)

    def get(self, task_id: UUID) -> Task | None:
        try:
            return _to_domain(TaskModel.get(TaskModel.id == task_id))
        except TaskModel.DoesNotExist:
            return None

    def update(self, task_id: UUID, changes: dict[str, Any]) -> Task | None:
        with self._db.atomic():
            try:
                model = TaskModel.get(TaskModel.id == task_id)
            except TaskModel.DoesNotExist:
                return None
            for key, value in _to_row(changes).items():
                setattr(model, key, value)
            model.save()
        return self.get(task_id)

    def delete(self, task_id: UUID) -> bool:
        query = TaskModel.delete().where(TaskModel.id == task_id)
        return query.execute() > 0

    def delete_all(self) -> int:
        return TaskModel.delete().execute()

    def find_page(self, task_filter: TaskFilter, offset: int, limit: int) -> List[Task]:
        query = (
            self._where(TaskModel.select(), task_filter)
            .order_by(TaskModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_to_domain(t) for t in query]

    def count(self, task_filter: TaskFilter | None = None) -> int:
        return self._where(TaskModel.select(), task_filter).count()

    def count_by_priority(self, task_filter: TaskFilter | None = None) -> dict[TaskPriority, int]:
        query = self._where(
            TaskModel.select(TaskModel.priority, fn.COUNT(TaskModel.id).alias("total")),
            task_filter,
        ).group_by(TaskModel.priority)
        return {TaskPriority(row.priority): row.total for row in query}

    def count_by_status(self, task_filter: TaskFilter | None = None) -> dict[TaskStatus, int]:
        query = self._where(
            TaskModel.select(TaskModel.status, fn.COUNT(TaskModel.id).alias("total")),
            task_filter,
        ).group_by(TaskModel.status)
        return {TaskStatus(row.status): row.total for row in query}

    def count_by_priority_and_status(self) -> dict[TaskPriority, dict[TaskStatus, int]]:
        query = TaskModel.select(
            TaskModel.priority,
            TaskModel.status,
            fn.COUNT(TaskModel.id).alias("total"),
        ).group_by(TaskModel.priority, TaskModel.status)
        counts: dict[TaskPriority, dict[TaskStatus, int]] = {}
        for row in query:
            counts.setdefault(TaskPriority(row.priority), {})[TaskStatus(row.status)] = row.total
        return counts
