import os
import tempfile
from pathlib import Path

# Antes de que se importe cualquier modulo de sesion: BDD en archivo temporal,
# compartida por todos los hilos (los conteos corren en un pool).
_TMP_DIR = Path(tempfile.mkdtemp(prefix="task-tracker-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ORM"] = "peewee"

import pytest
from fastapi.testclient import TestClient

from backend_fastapi.api import deps
from backend_fastapi.main import app
from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksUseCase
from core.application.update_task import UpdateTaskUseCase
from fakes import InMemoryTaskRepository
from infrastructure.peewee.model.models import TaskModel
from infrastructure.peewee.session.db import db


@pytest.fixture
def peewee_db():
    db.connect(reuse_if_open=True)
    db.drop_tables([TaskModel], safe=True)
    db.create_tables([TaskModel], safe=True)
    yield db
    TaskModel.delete().execute()


@pytest.fixture
def api_client(peewee_db):
    """API real contra SQLite via peewee."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def memory_repo():
    return InMemoryTaskRepository()


@pytest.fixture
def memory_app(memory_repo):
    """La app con los casos de uso apuntando a un repositorio en memoria."""
    app.dependency_overrides[deps.list_tasks_use_case] = lambda: ListTasksUseCase(memory_repo)
    app.dependency_overrides[deps.get_task_use_case] = lambda: GetTaskUseCase(memory_repo)
    app.dependency_overrides[deps.create_task_use_case] = lambda: CreateTaskUseCase(memory_repo)
    app.dependency_overrides[deps.update_task_use_case] = lambda: UpdateTaskUseCase(memory_repo)
    app.dependency_overrides[deps.delete_task_use_case] = lambda: DeleteTaskUseCase(memory_repo)
    yield app
    app.dependency_overrides.clear()
