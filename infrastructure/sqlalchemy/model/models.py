from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text

from core.domain.models.task import utcnow
from infrastructure.sqlalchemy.session.db import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid4()))
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="Todo")
    priority = Column(String, nullable=False, default="Low", index=True)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
