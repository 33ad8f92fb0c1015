from uuid import uuid4

from peewee import CharField, DateTimeField, Model, TextField, UUIDField

from core.domain.models.task import TaskPriority, TaskStatus, utcnow
from infrastructure.peewee.session.db import db


class TaskModel(Model):
    id = UUIDField(primary_key=True, default=uuid4)
    description = TextField()
    status = CharField(
        default=TaskStatus.TODO.value,
        choices=[(s.value, s.value) for s in TaskStatus],
    )
    priority = CharField(
        default=TaskPriority.LOW.value,
        choices=[(p.value, p.value) for p in TaskPriority],
        index=True,
    )
    due_date = DateTimeField(null=True)
    created_at = DateTimeField(default=utcnow, index=True)

    class Meta:
        database = db
        table_name = "tasks"
