from fastapi.testclient import TestClient

from studysprint.core.errors import PersistenceError


def create(client: TestClient, **body) -> dict:
    r = client.post("/api/goals", json=body)
    assert r.status_code == 201, r.text
    return r.json()["item"]


def test_create_toggle_and_filter(client: TestClient):
    goal = create(client, title="Read 10 pages")
    assert goal["id"] == 1
    assert goal["priority"] == "medium"
    assert goal["dueDate"] is None
    assert goal["completed"] is False
    assert goal["archived"] is False
    assert goal["createdAt"].endswith("Z")

    r = client.patch(f"/api/goals/{goal['id']}/toggle")
    assert r.status_code == 200
    assert r.json()["item"]["completed"] is True

    completed = client.get("/api/goals", params={"status": "completed"}).json()
    active = client.get("/api/goals", params={"status": "active"}).json()
    assert [item["id"] for item in completed["items"]] == [goal["id"]]
    assert active["items"] == []


def test_create_validation(client: TestClient):
    r = client.post("/api/goals", json={"title": "   "})
    assert r.status_code == 400
    assert "title" in r.json()["detail"]

    r = client.post("/api/goals", json={})
    assert r.status_code == 400
    assert "title" in r.json()["detail"]

    r = client.post("/api/goals", json={"title": "x", "priority": "urgent"})
    assert r.status_code == 400
    assert "priority" in r.json()["detail"].lower()

    r = client.post("/api/goals", json={"title": "x", "dueDate": "15/06/2024"})
    assert r.status_code == 400
    assert "dueDate" in r.json()["detail"]


def test_create_normalizes_optional_fields(client: TestClient):
    goal = create(client, title=" Run ", priority=" HIGH ", dueDate="")
    assert goal["title"] == "Run"
    assert goal["priority"] == "high"
    assert goal["dueDate"] is None


def test_list_metadata_and_bad_params(client: TestClient):
    for i in range(12):
        create(client, title=f"Goal {i}")

    r = client.get("/api/goals", params={"pageSize": "5", "page": "9", "order": "asc"})
    assert r.status_code == 200
    data = r.json()
    assert data["meta"] == {"page": 3, "pageSize": 5, "totalItems": 12, "totalPages": 3}
    assert [item["title"] for item in data["items"]] == ["Goal 10", "Goal 11"]

    r = client.get("/api/goals", params={"pageSize": "51"})
    assert r.status_code == 400
    assert "pageSize" in r.json()["detail"]

    r = client.get("/api/goals", params={"status": "someday", "page": "0"})
    assert r.status_code == 400
    assert r.json()["detail"].startswith("status")


def test_update_three_state_fields(client: TestClient):
    goal = create(client, title="a", priority="low", dueDate="2024-07-01")

    r = client.patch(f"/api/goals/{goal['id']}", json={"title": " b "})
    item = r.json()["item"]
    assert item["title"] == "b"
    assert item["dueDate"] == "2024-07-01"
    assert item["priority"] == "low"

    r = client.patch(f"/api/goals/{goal['id']}", json={"dueDate": None, "archived": True})
    item = r.json()["item"]
    assert item["dueDate"] is None
    assert item["archived"] is True
    assert item["createdAt"] == goal["createdAt"]


def test_update_rejects_bad_values(client: TestClient):
    goal = create(client, title="a")
    for body, field in [
        ({"title": ""}, "title"),
        ({"title": None}, "title"),
        ({"priority": "urgent"}, "priority"),
        ({"dueDate": "2024-6-1"}, "dueDate"),
        ({"archived": "yes"}, "archived"),
    ]:
        r = client.patch(f"/api/goals/{goal['id']}", json=body)
        assert r.status_code == 400, body
        assert field in r.json()["detail"]

    assert client.get(f"/api/goals/{goal['id']}").json()["item"]["title"] == "a"


def test_missing_goal_returns_404(client: TestClient):
    assert client.get("/api/goals/99").status_code == 404
    assert client.patch("/api/goals/99", json={"title": "x"}).status_code == 404
    assert client.patch("/api/goals/99/toggle").status_code == 404
    assert client.patch("/api/goals/99/archive").status_code == 404
    assert client.post("/api/goals/99/duplicate-tomorrow").status_code == 404
    assert client.delete("/api/goals/99").status_code == 404
    assert client.get("/api/goals/abc").status_code == 404


def test_delete(client: TestClient):
    goal = create(client, title="a")
    r = client.delete(f"/api/goals/{goal['id']}")
    assert r.status_code == 204
    assert r.content == b""
    assert client.get("/api/goals").json()["meta"]["totalItems"] == 0


def test_archive_flips_or_sets(client: TestClient):
    goal = create(client, title="a")

    r = client.patch(f"/api/goals/{goal['id']}/archive")
    assert r.json()["item"]["archived"] is True
    assert client.get("/api/goals", params={"status": "active"}).json()["items"] == []
    archived = client.get("/api/goals", params={"status": "archived"}).json()["items"]
    assert [item["id"] for item in archived] == [goal["id"]]

    r = client.patch(f"/api/goals/{goal['id']}/archive", json={"archived": True})
    assert r.json()["item"]["archived"] is True

    r = client.patch(f"/api/goals/{goal['id']}/archive", json={"archived": "no"})
    assert r.status_code == 400


def test_duplicate_tomorrow_uses_today(client: TestClient):
    goal = create(client, title="Stretch", priority="high")
    client.patch(f"/api/goals/{goal['id']}/toggle")

    r = client.post(f"/api/goals/{goal['id']}/duplicate-tomorrow")
    assert r.status_code == 201
    item = r.json()["item"]
    assert item["id"] == 2
    assert item["title"] == "Stretch"
    assert item["priority"] == "high"
    assert item["dueDate"] == "2024-06-16"
    assert item["completed"] is False


def test_bulk_actions(client: TestClient):
    for title in ("a", "b", "c"):
        create(client, title=title)
    client.patch("/api/goals/1/toggle")

    r = client.patch("/api/goals/actions/complete-all")
    assert r.json() == {"updated": 2}

    r = client.delete("/api/goals/actions/clear-completed")
    assert r.json() == {"deleted": 3}
    assert client.get("/api/goals").json()["items"] == []


def test_stats_use_view_filters(client: TestClient):
    create(client, title="a", priority="high", dueDate="2024-06-14")
    create(client, title="b", priority="low", dueDate="2024-06-15")
    create(client, title="c", priority="high")
    client.patch("/api/goals/3/toggle")

    r = client.get("/api/goals/stats")
    assert r.json() == {
        "total": 3,
        "active": 2,
        "completed": 1,
        "overdue": 1,
        "byPriority": {"low": 1, "medium": 0, "high": 2},
    }

    r = client.get("/api/goals/stats", params={"priority": "high", "page": "5"})
    assert r.json()["total"] == 2

    assert client.get("/api/goals/stats", params={"order": "sideways"}).status_code == 400


def test_export_and_import(client: TestClient):
    create(client, title="a", priority="high")
    create(client, title="b")
    client.patch("/api/goals/2/archive")

    r = client.get("/api/goals/export")
    assert r.status_code == 200
    assert r.headers["content-disposition"] == 'attachment; filename="goals-export-' + r.json()["exportedAt"][:10] + '.json"'
    exported = r.json()["items"]
    assert [item["title"] for item in exported] == ["a", "b"]

    r = client.post("/api/goals/import", json={"mode": "merge", "items": [{"title": "c"}]})
    assert r.json() == {"imported": 1, "total": 3, "mode": "merge"}

    r = client.post("/api/goals/import", json={"items": exported})
    assert r.json() == {"imported": 2, "total": 2, "mode": "replace"}
    r = client.get("/api/goals/export")
    assert r.json()["items"] == exported


def test_import_rejections(client: TestClient):
    create(client, title="keep")

    r = client.post("/api/goals/import", json={"items": [{"title": "a"}, {"title": "b"}, {"title": " "}]})
    assert r.status_code == 400
    assert "index 2" in r.json()["detail"]

    r = client.post("/api/goals/import", json={"mode": "append", "items": []})
    assert r.status_code == 400
    assert "mode" in r.json()["detail"]

    r = client.post("/api/goals/import", json={"items": "nope"})
    assert r.status_code == 400

    titles = [item["title"] for item in client.get("/api/goals").json()["items"]]
    assert titles == ["keep"]


def test_persistence_failure_returns_500(client: TestClient, store, monkeypatch):
    def fail(records):
        raise PersistenceError("disk full")

    monkeypatch.setattr(store.storage, "save", fail)
    r = client.post("/api/goals", json={"title": "a"})
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to save goals."


def test_missing_or_non_object_body_is_named(client: TestClient):
    r = client.post("/api/goals")
    assert r.status_code == 400
    assert r.json()["detail"] == "request body is required."

    r = client.post("/api/goals", json=["Read"])
    assert r.status_code == 400
    assert r.json()["detail"] == "request body must be a JSON object."


def test_import_with_out_of_range_created_at_keeps_service_usable(client: TestClient):
    create(client, title="keep")

    r = client.post("/api/goals/import", json={
        "mode": "merge",
        "items": [{"title": "old", "createdAt": "0001-01-01T00:00:00+05:00"}],
    })
    assert r.status_code == 200

    create(client, title="later")
    assert client.patch("/api/goals/1/toggle").status_code == 200
    titles = [item["title"] for item in client.get("/api/goals/export").json()["items"]]
    assert titles == ["keep", "old", "later"]
    assert client.get("/api/goals").status_code == 200
