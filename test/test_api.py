import math
from uuid import uuid4

import pytest


def _create(client, description, status="Todo", priority="Low", **extra):
    response = client.post(
        "/api/tasks",
        json={"description": description, "status": status, "priority": priority, **extra},
    )
    assert response.status_code == 201
    return response.json()


def test_health(api_client):
    assert api_client.get("/api/health").json() == {"status": "ok"}


def test_list_empty_store(api_client):
    response = api_client.get("/api/tasks", params={"page": 1, "limit": 10})

    assert response.status_code == 200
    data = response.json()
    assert data["tasks"] == []
    assert data["totalPages"] == 0
    assert data["totalCount"] == 0
    assert data["totalTasks"] == 0
    assert data["currentPage"] == 1
    assert data["priorityCounts"] == {
        "Minor": 0, "Low": 0, "Moderate": 0, "Important": 0, "Critical": 0,
    }
    assert data["statusCounts"] == {"Todo": 0, "Progress": 0, "Done": 0}
    assert data["priorityStatusCounts"]["Critical"] == {"Todo": 0, "Progress": 0, "Done": 0}


def test_create_then_get_round_trip(api_client):
    created = _create(
        api_client, "Prepare demo", status="Progress", priority="Critical",
        dueDate="2030-05-01T10:00:00",
    )

    response = api_client.get(f"/api/tasks/{created['id']}")

    assert response.status_code == 200
    task = response.json()
    assert task == created
    assert task["description"] == "Prepare demo"
    assert task["status"] == "Progress"
    assert task["priority"] == "Critical"
    assert task["dueDate"].startswith("2030-05-01T10:00:00")
    assert task["createdAt"]


def test_create_defaults_and_validation(api_client):
    task = api_client.post("/api/tasks", json={"description": "Bare"}).json()
    assert task["status"] == "Todo"
    assert task["priority"] == "Low"
    assert task["dueDate"] is None

    assert api_client.post("/api/tasks", json={"description": "x", "status": "Nope"}).status_code == 422
    assert api_client.post("/api/tasks", json={"description": ""}).status_code == 422
    assert api_client.post("/api/tasks", json={}).status_code == 422


def test_get_missing_is_plain_text_404(api_client):
    response = api_client.get(f"/api/tasks/{uuid4()}")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "No task with ID found"


@pytest.mark.parametrize(
    "method, kwargs",
    [("get", {}), ("patch", {"json": {"status": "Done"}}), ("delete", {})],
)
def test_non_uuid_id_is_plain_text_404(api_client, method, kwargs):
    response = getattr(api_client, method)("/api/tasks/abc", **kwargs)

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "No task with ID found"


def test_patch_status_only(api_client):
    created = _create(api_client, "Toggle me", priority="Important", dueDate="2031-01-01T00:00:00")

    response = api_client.patch(f"/api/tasks/{created['id']}", json={"status": "Done"})

    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "Done"
    for key in ("id", "description", "priority", "dueDate", "createdAt"):
        assert updated[key] == created[key]


def test_patch_can_clear_due_date(api_client):
    created = _create(api_client, "Has date", dueDate="2031-01-01T00:00:00")

    updated = api_client.patch(f"/api/tasks/{created['id']}", json={"dueDate": None}).json()

    assert updated["dueDate"] is None
    assert updated["description"] == "Has date"


def test_patch_rejects_null_required_field(api_client):
    created = _create(api_client, "Keep status")

    response = api_client.patch(f"/api/tasks/{created['id']}", json={"status": None})

    assert response.status_code == 422


def test_patch_missing_is_404(api_client):
    response = api_client.patch(f"/api/tasks/{uuid4()}", json={"status": "Done"})

    assert response.status_code == 404
    assert response.text == "No task with ID found"


def test_delete_then_get_is_not_found(api_client):
    created = _create(api_client, "Short lived")

    response = api_client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert api_client.get(f"/api/tasks/{created['id']}").status_code == 404
    assert api_client.delete(f"/api/tasks/{created['id']}").status_code == 404


def test_search_scenario(api_client):
    created = _create(api_client, "A", status="Todo", priority="Low")

    found = api_client.get("/api/tasks", params={"search": "a"}).json()
    missing = api_client.get("/api/tasks", params={"search": "zzz"}).json()

    assert created["id"] in [t["id"] for t in found["tasks"]]
    assert created["id"] not in [t["id"] for t in missing["tasks"]]
    assert missing["totalCount"] == 0
    assert missing["totalTasks"] == 1


def test_search_ignores_accented_case(api_client):
    created = _create(api_client, "Réunion ÉQUIPE")
    _create(api_client, "Reunion general")

    listing = api_client.get("/api/tasks", params={"search": "équipe"}).json()

    assert listing["totalCount"] == 1
    assert [t["id"] for t in listing["tasks"]] == [created["id"]]


def test_list_filters_paginates_and_aggregates(api_client):
    rows = [
        ("Write tests", "Todo", "Low"),
        ("Ship release", "Done", "Critical"),
        ("Refactor models", "Progress", "Moderate"),
        ("Write docs", "Done", "Low"),
        ("Triage bugs", "Todo", "Critical"),
        ("Update deps", "Progress", "Minor"),
    ]
    for description, status, priority in rows:
        _create(api_client, description, status=status, priority=priority)

    data = api_client.get(
        "/api/tasks", params={"priority": "Low,Critical", "limit": 2, "page": 1}
    ).json()
    assert data["totalCount"] == 4
    assert data["totalPages"] == math.ceil(4 / 2)
    assert len(data["tasks"]) == 2
    assert {t["priority"] for t in data["tasks"]} <= {"Low", "Critical"}
    created = [t["createdAt"] for t in data["tasks"]]
    assert created == sorted(created, reverse=True)
    assert data["tasks"][0]["description"] == "Triage bugs"

    data = api_client.get(
        "/api/tasks", params={"priority": "Low,Critical", "status": "Done"}
    ).json()
    assert sorted(t["description"] for t in data["tasks"]) == ["Ship release", "Write docs"]
    # statusCounts no aplica el filtro de estado.
    assert data["statusCounts"] == {"Todo": 2, "Progress": 0, "Done": 2}
    assert data["totalTasks"] == 6
    assert sum(data["priorityCounts"].values()) == data["totalTasks"]
    for priority, by_status in data["priorityStatusCounts"].items():
        assert sum(by_status.values()) == data["priorityCounts"][priority]


def test_status_all_means_no_filter(api_client):
    _create(api_client, "one", status="Done")
    _create(api_client, "two", status="Todo")

    data = api_client.get("/api/tasks", params={"status": "all"}).json()

    assert data["totalCount"] == 2


@pytest.mark.parametrize(
    "params",
    [
        {"priority": "Urgent"},
        {"status": "Blocked"},
        {"page": 0},
        {"limit": 0},
    ],
)
def test_list_rejects_bad_query(api_client, params):
    assert api_client.get("/api/tasks", params=params).status_code == 422
