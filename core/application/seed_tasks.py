import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import uuid4

from faker import Faker

from core.domain.models.task import TaskPriority, TaskStatus, utcnow
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SeedTasksCommand:
    count: int = 100
    seed: int | None = None


class SeedTasksUseCase:
    """
    Vacia la tabla y la llena con tareas sinteticas para desarrollo.
    """

    def __init__(self, repository: TaskRepository, faker: Faker | None = None) -> None:
        self._repository = repository
        self._faker = faker or Faker()

    def execute(self, cmd: SeedTasksCommand) -> int:
        if cmd.seed is not None:
            self._faker.seed_instance(cmd.seed)

        removed = self._repository.delete_all()
        logger.info(f"Seed: {removed} tareas previas eliminadas")

        # created_at creciente para que el orden de listado sea estable.
        start = utcnow()
        rows = [
            {
                "id": uuid4(),
                "description": self._faker.sentence(),
                "status": self._faker.random_element(list(TaskStatus)),
                "priority": self._faker.random_element(list(TaskPriority)),
                "due_date": None,
                "created_at": start + timedelta(milliseconds=i),
            }
            for i in range(cmd.count)
        ]
        inserted = self._repository.create_many(rows)
        logger.info(f"Seed: {inserted} tareas creadas")
        return inserted
