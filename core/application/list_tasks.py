"""
Listado paginado de tareas con sus agregados.

Las seis lecturas que componen la respuesta son independientes entre si,
por eso se lanzan en paralelo sobre un pool compartido y se juntan al final.
"""

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_filter import build_task_filter
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)

# Pool compartido: no se crea uno por request.
executor = ThreadPoolExecutor(
    max_workers=int(os.getenv("AGGREGATION_WORKERS", "6")),
    thread_name_prefix="TaskAggregation",
)


@dataclass(slots=True)
class ListTasksCommand:
    """
    Precondiciones: page >= 1 y limit >= 1 (no se validan aqui).
    """

    page: int = 1
    limit: int = 10
    search: str = ""
    priorities: tuple[TaskPriority, ...] = ()
    statuses: tuple[TaskStatus, ...] = ()


@dataclass(slots=True)
class TaskListing:
    tasks: list[Task]
    current_page: int
    total_pages: int
    total_count: int
    total_tasks: int
    priority_counts: dict[TaskPriority, int] = field(default_factory=dict)
    status_counts: dict[TaskStatus, int] = field(default_factory=dict)
    priority_status_counts: dict[TaskPriority, dict[TaskStatus, int]] = field(
        default_factory=dict
    )


def _zero_filled(counts, members):
    return {member: counts.get(member, 0) for member in members}


class ListTasksUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: ListTasksCommand) -> TaskListing:
        task_filter = build_task_filter(cmd.search, cmd.priorities, cmd.statuses)
        offset = (cmd.page - 1) * cmd.limit
        repo = self._repository

        future_page = executor.submit(repo.find_page, task_filter, offset, cmd.limit)
        future_count = executor.submit(repo.count, task_filter)
        future_total = executor.submit(repo.count)
        future_priority = executor.submit(repo.count_by_priority)
        future_status = executor.submit(repo.count_by_status, task_filter.without_status())
        future_matrix = executor.submit(repo.count_by_priority_and_status)

        total_count = future_count.result()
        matrix = future_matrix.result()

        listing = TaskListing(
            tasks=future_page.result(),
            current_page=cmd.page,
            total_pages=math.ceil(total_count / cmd.limit),
            total_count=total_count,
            total_tasks=future_total.result(),
            priority_counts=_zero_filled(future_priority.result(), TaskPriority),
            status_counts=_zero_filled(future_status.result(), TaskStatus),
            priority_status_counts={
                priority: _zero_filled(matrix.get(priority, {}), TaskStatus)
                for priority in TaskPriority
            },
        )
        logger.debug(
            f"Listado pagina {cmd.page}: {len(listing.tasks)} de {total_count} tareas"
        )
        return listing
