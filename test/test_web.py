import pytest
from fastapi.testclient import TestClient

from core.domain.models.task import TaskStatus
from core.domain.models.task_filter import TaskFilter
from frontend import web
from frontend.api_client import TaskApiClient
from frontend.web import SESSION_COOKIE, BoardRegistry, get_registry


@pytest.fixture
def registry(memory_app):
    boards = BoardRegistry(api_factory=lambda: TaskApiClient(http=TestClient(memory_app)))
    memory_app.dependency_overrides[get_registry] = lambda: boards
    return boards


@pytest.fixture
def browser(memory_app, registry):
    return TestClient(memory_app)


def _add(browser, description, **fields):
    data = {"description": description, "status": "Todo", "priority": "Low", "due_date": ""}
    data.update(fields)
    return browser.post("/ui/tasks", data=data)


def test_first_visit_renders_board_and_sets_cookie(browser, registry):
    response = browser.get("/")

    assert response.status_code == 200
    assert "Total Tasks" in response.text
    assert "No tasks found." in response.text
    assert SESSION_COOKIE in response.cookies
    assert len(registry) == 1


def test_each_browser_gets_its_own_board(memory_app, registry):
    TestClient(memory_app).get("/")
    TestClient(memory_app).get("/")

    assert len(registry) == 2


def test_add_task_through_dialog(browser, memory_repo):
    browser.get("/")
    page = browser.post("/ui/dialog/add")
    assert "Add New Task" in page.text

    page = _add(browser, "Water the plants", priority="Critical", due_date="2030-06-01")

    assert page.status_code == 200
    assert "Water the plants" in page.text
    assert "Task added successfully" in page.text
    assert "Add New Task" not in page.text
    assert "June 1, 2030" in page.text
    assert memory_repo.count() == 1


def test_toast_is_shown_once(browser):
    browser.get("/")
    browser.post("/ui/dialog/add")
    _add(browser, "Only once")

    assert "Task added successfully" not in browser.get("/").text


def test_invalid_form_shows_error(browser, memory_repo):
    browser.get("/")
    browser.post("/ui/dialog/add")

    page = _add(browser, "a")

    assert "Description must be at least 2 characters." in page.text
    assert "Add New Task" in page.text
    assert memory_repo.count() == 0


def test_search_and_filters(browser):
    browser.get("/")
    for description in ("Paint fence", "Clean garage"):
        browser.post("/ui/dialog/add")
        _add(browser, description)

    page = browser.post("/ui/search", data={"search": "fence"})
    assert "Paint fence" in page.text
    assert "Clean garage" not in page.text
    assert "Results: 1" in page.text

    page = browser.post("/ui/filters/reset")
    assert "Clean garage" in page.text

    page = browser.post("/ui/filters/status/Done")
    assert "No tasks found." in page.text


def test_toggle_and_delete(browser, memory_repo):
    browser.get("/")
    browser.post("/ui/dialog/add")
    _add(browser, "Finish chapter")
    task = memory_repo.find_page(TaskFilter(), 0, 1)[0]

    browser.post(f"/ui/tasks/{task.id}/toggle", data={"done": "true"})
    assert memory_repo.get(task.id).status == TaskStatus.DONE

    page = browser.post(f"/ui/tasks/{task.id}/delete")
    assert "Are you sure?" in page.text

    page = browser.post("/ui/delete/confirm")
    assert "Task deleted successfully" in page.text
    assert memory_repo.count() == 0


def test_edit_dialog(browser, memory_repo):
    browser.get("/")
    browser.post("/ui/dialog/add")
    _add(browser, "Old text")
    task = memory_repo.find_page(TaskFilter(), 0, 1)[0]

    page = browser.post(f"/ui/tasks/{task.id}/edit")
    assert "Edit Task" in page.text
    assert 'value="Old text"' in page.text

    page = browser.post(
        "/ui/edit",
        data={"description": "New text", "status": "Progress", "priority": "Minor", "due_date": ""},
    )
    assert "Task updated successfully" in page.text
    assert memory_repo.get(task.id).description == "New text"


class _ClosableApi:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_registry_evicts_least_recent_session_and_closes_its_client():
    clients = []

    def factory():
        clients.append(_ClosableApi())
        return clients[-1]

    boards = BoardRegistry(api_factory=factory, max_boards=3)
    first, _, _ = boards.get_or_create(None)
    second, _, _ = boards.get_or_create(None)
    boards.get_or_create(None)

    same, _, is_new = boards.get_or_create(first)
    assert same == first and not is_new
    boards.get_or_create(None)

    assert len(boards) == 3
    assert first in boards
    assert second not in boards
    assert [api.closed for api in clients] == [False, True, False, False]


def test_cookieless_visits_stay_bounded(memory_app):
    clients = []

    def factory():
        clients.append(TaskApiClient(http=TestClient(memory_app)))
        return clients[-1]

    boards = BoardRegistry(api_factory=factory, max_boards=2)
    memory_app.dependency_overrides[get_registry] = lambda: boards

    for _ in range(6):
        assert TestClient(memory_app).get("/").status_code == 200

    assert len(boards) == 2
    assert len(clients) == 6


def test_app_shutdown_closes_board_sessions(memory_app, monkeypatch):
    boards = BoardRegistry(api_factory=_ClosableApi, max_boards=5)
    _, board, _ = boards.get_or_create(None)
    monkeypatch.setattr(web, "registry", boards)

    with TestClient(memory_app):
        pass

    assert len(boards) == 0
    assert board._api.closed
