from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import String, func

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_filter import TaskFilter
from core.domain.ports.task_repository import TaskRepository
from infrastructure.sqlalchemy.model.models import TaskModel
from infrastructure.sqlalchemy.session.db import IS_SQLITE, get_session, init_db


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _to_columns(values: dict[str, Any]) -> dict[str, Any]:
    columns = dict(values)
    if "id" in columns:
        columns["id"] = str(columns["id"])
    for key in ("status", "priority"):
        if key in columns and not isinstance(columns[key], str):
            columns[key] = columns[key].value
    if "due_date" in columns:
        columns["due_date"] = _naive_utc(columns["due_date"])
    return columns


def _to_domain(task_model: TaskModel) -> Task:
    return Task(
        id=UUID(task_model.id),
        description=task_model.description,
        status=TaskStatus(task_model.status),
        priority=TaskPriority(task_model.priority),
        due_date=task_model.due_date,
        created_at=task_model.created_at,
    )


def _where(query, task_filter: TaskFilter | None):
    if task_filter is None:
        return query
    if task_filter.search is not None:
        if IS_SQLITE:
            column = func.casefold(TaskModel.description, type_=String)
            query = query.filter(column.contains(task_filter.search.casefold(), autoescape=True))
        else:
            query = query.filter(
                TaskModel.description.icontains(task_filter.search, autoescape=True)
            )
    if task_filter.priorities:
        query = query.filter(TaskModel.priority.in_([p.value for p in task_filter.priorities]))
    if task_filter.statuses:
        query = query.filter(TaskModel.status.in_([s.value for s in task_filter.statuses]))
    return query


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self) -> None:
        init_db()

    def create(self, description, status, priority, due_date=None) -> Task:
        session = get_session()
        try:
            task_model = TaskModel(
                **_to_columns(
                    {
                        "description": description,
                        "status": status,
                        "priority": priority,
                        "due_date": due_date,
                    }
                )
            )
            session.add(task_model)
            session.commit()
            session.refresh(task_model)
            return _to_domain(task_model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_many(self, tasks: Iterable[dict[str, Any]]) -> int:
        session = get_session()
        try:
            models = [TaskModel(**_to_columns(task)) for task in tasks]
            session.add_all(models)
            session.commit()
            return len(models)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, task_id: UUID) -> Task | None:
        session = get_session()
        try:
            task_model = session.get(TaskModel, str(task_id))
            if task_model is None:
                return None
            return _to_domain(task_model)
        finally:
            session.close()

    def update(self, task_id: UUID, changes: dict[str, Any]) -> Task | None:
        session = get_session()
        try:
            task_model = session.get(TaskModel, str(task_id))
            if task_model is None:
                return None
            for key, value in _to_columns(changes).items():
                setattr(task_model, key, value)
            session.commit()
            session.refresh(task_model)
            return _to_domain(task_model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, task_id: UUID) -> bool:
        session = get_session()
        try:
            task_model = session.get(TaskModel, str(task_id))
            if task_model is None:
                return False
            session.delete(task_model)
            session.commit()
            return True
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete_all(self) -> int:
        session = get_session()
        try:
            removed = session.query(TaskModel).delete()
            session.commit()
            return removed
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def find_page(self, task_filter: TaskFilter, offset: int, limit: int) -> list[Task]:
        session = get_session()
        try:
            query = (
                _where(session.query(TaskModel), task_filter)
                .order_by(TaskModel.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            return [_to_domain(task_model) for task_model in query.all()]
        finally:
            session.close()

    def count(self, task_filter: TaskFilter | None = None) -> int:
        session = get_session()
        try:
            return _where(session.query(TaskModel), task_filter).count()
        finally:
            session.close()

    def count_by_priority(self, task_filter: TaskFilter | None = None) -> dict[TaskPriority, int]:
        session = get_session()
        try:
            query = _where(
                session.query(TaskModel.priority, func.count(TaskModel.id)),
                task_filter,
            ).group_by(TaskModel.priority)
            return {TaskPriority(priority): total for priority, total in query.all()}
        finally:
            session.close()

    def count_by_status(self, task_filter: TaskFilter | None = None) -> dict[TaskStatus, int]:
        session = get_session()
        try:
            query = _where(
                session.query(TaskModel.status, func.count(TaskModel.id)),
                task_filter,
            ).group_by(TaskModel.status)
            return {TaskStatus(status): total for status, total in query.all()}
        finally:
            session.close()

    def count_by_priority_and_status(self) -> dict[TaskPriority, dict[TaskStatus, int]]:
        session = get_session()
        try:
            query = session.query(
                TaskModel.priority, TaskModel.status, func.count(TaskModel.id)
            ).group_by(TaskModel.priority, TaskModel.status)
            counts: dict[TaskPriority, dict[TaskStatus, int]] = {}
            for priority, status, total in query.all():
                counts.setdefault(TaskPriority(priority), {})[TaskStatus(status)] = total
            return counts
        finally:
            session.close()
