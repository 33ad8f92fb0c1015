from uuid import UUID


class TaskNotFoundError(ValueError):
    def __init__(self, task_id: UUID) -> None:
        super().__init__(f"Task with id {task_id} not found")
        self.task_id = task_id
