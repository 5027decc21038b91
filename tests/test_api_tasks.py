import pytest


def _create(client, headers, title):
    response = client.post("/api/tasks", json={"title": title}, headers=headers)
    assert response.status_code == 200
    return response.json()


def _titles(client, headers):
    return [task["title"] for task in client.get("/api/tasks", headers=headers).json()]


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer nope"},
    {"Authorization": "Bearer token-expired"},
])
def test_requests_without_valid_session_are_rejected(client, headers):
    response = client.get("/api/tasks", headers=headers)
    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}


def test_auth_is_checked_before_validation(client):
    response = client.post("/api/tasks", json={})
    assert response.status_code == 401


def test_session_cookie_is_accepted(client, tokens):
    response = client.get("/api/tasks", headers={"Cookie": f"session_token={tokens['alice']}"})
    assert response.status_code == 200
    assert response.json() == []


def test_create_returns_stored_task(client, alice):
    task = _create(client, alice, "  Buy milk  ")
    assert task["title"] == "Buy milk"
    assert task["done"] is False
    assert task["user_id"] == "alice"
    assert isinstance(task["id"], int)
    assert task["created_at"] > 0


@pytest.mark.parametrize("payload", [{}, {"title": ""}, {"title": "   "}])
def test_create_requires_title(client, alice, payload):
    response = client.post("/api/tasks", json=payload, headers=alice)
    assert response.status_code == 400
    assert "error" in response.json()
    assert client.get("/api/tasks", headers=alice).json() == []


def test_create_toggle_delete_scenario(client, alice):
    first = _create(client, alice, "a")
    second = _create(client, alice, "b")
    assert _titles(client, alice) == ["b", "a"]

    response = client.put("/api/tasks", json={"id": first["id"], "done": True}, headers=alice)
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    tasks = {task["id"]: task for task in client.get("/api/tasks", headers=alice).json()}
    assert tasks[first["id"]]["done"] is True
    assert tasks[second["id"]]["done"] is False

    response = client.delete("/api/tasks", params={"id": second["id"]}, headers=alice)
    assert response.status_code == 200
    assert _titles(client, alice) == ["a"]


def test_partial_update_keeps_absent_fields(client, alice):
    task = _create(client, alice, "draft")
    client.put("/api/tasks", json={"id": task["id"], "done": True}, headers=alice)
    client.put("/api/tasks", json={"id": task["id"], "title": "final"}, headers=alice)

    [stored] = client.get("/api/tasks", headers=alice).json()
    assert stored["title"] == "final"
    assert stored["done"] is True


def test_update_rejects_empty_title(client, alice):
    task = _create(client, alice, "keep")
    response = client.put("/api/tasks", json={"id": task["id"], "title": " "}, headers=alice)
    assert response.status_code == 400
    assert _titles(client, alice) == ["keep"]


def test_other_users_tasks_are_invisible_and_immutable(client, alice, bob):
    task = _create(client, alice, "private")

    assert client.get("/api/tasks", headers=bob).json() == []

    response = client.put("/api/tasks", json={"id": task["id"], "title": "hijacked", "done": True}, headers=bob)
    assert response.status_code == 200
    response = client.delete("/api/tasks", params={"id": task["id"]}, headers=bob)
    assert response.status_code == 200

    [stored] = client.get("/api/tasks", headers=alice).json()
    assert stored["title"] == "private"
    assert stored["done"] is False


def test_delete_is_idempotent(client, alice):
    task = _create(client, alice, "once")
    for _ in range(2):
        response = client.delete("/api/tasks", params={"id": task["id"]}, headers=alice)
        assert response.status_code == 200
    assert client.get("/api/tasks", headers=alice).json() == []


def test_mutations_require_id(client, alice):
    response = client.put("/api/tasks", json={"title": "x"}, headers=alice)
    assert response.status_code == 400
    assert response.json() == {"error": "id required"}

    response = client.delete("/api/tasks", headers=alice)
    assert response.status_code == 400
    assert response.json() == {"error": "id required"}

    response = client.delete("/api/tasks", params={"id": "abc"}, headers=alice)
    assert response.status_code == 400


def test_ids_are_not_reused(client, alice):
    first = _create(client, alice, "one")
    client.delete("/api/tasks", params={"id": first["id"]}, headers=alice)
    second = _create(client, alice, "two")
    assert second["id"] > first["id"]


def test_ids_outside_bigint_are_rejected(client, alice):
    response = client.delete("/api/tasks", params={"id": str(2 ** 70)}, headers=alice)
    assert response.status_code == 400
    assert response.json() == {"error": "id out of range"}

    response = client.put("/api/tasks", json={"id": 2 ** 70, "done": True}, headers=alice)
    assert response.status_code == 400

    response = client.put("/api/tasks", json={"id": -(2 ** 63) - 1, "done": True}, headers=alice)
    assert response.status_code == 400


@pytest.mark.parametrize("payload", [
    {"id": 1, "done": "yes"},
    {"id": 1, "done": 1},
    {"id": "1", "done": True},
    {"id": True, "done": True},
])
def test_patch_fields_are_strictly_typed(client, alice, payload):
    response = client.put("/api/tasks", json=payload, headers=alice)
    assert response.status_code == 400


def test_malformed_body_without_session_is_unauthorized(client):
    response = client.post(
        "/api/tasks", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}


def test_malformed_body_with_session_is_a_bad_request(client, alice):
    response = client.post(
        "/api/tasks", content="{not json", headers={"Content-Type": "application/json", **alice}
    )
    assert response.status_code == 400
    message = response.json()["error"]
    assert not message[0].isdigit()
    assert "JSON" in message
