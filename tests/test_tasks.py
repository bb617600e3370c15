# File: tests/test_tasks.py

import time
import uuid

from sqlalchemy import func, select

from app.models.task import Task


def _headers(user):
    return {"x-auth": user.token}


def _task_count(db):
    return db.execute(select(func.count()).select_from(Task)).scalar_one()


# -----------------------------
# POST /tasks
# -----------------------------

def test_create_task(client, seed, db):
    user = seed.users[0]
    resp = client.post(
        "/tasks",
        headers=_headers(user),
        json={"title": "  Test task text ", "text": " details ", "dueDate": "2026-11-01T09:00:00Z"},
    )
    assert resp.status_code == 200

    body = resp.json()
    assert body["title"] == "Test task text"
    assert body["text"] == "details"
    assert body["ownerId"] == user.id
    assert body["completed"] is False
    assert body["completedAt"] is None
    assert body["dueDate"].startswith("2026-11-01T09:00:00")
    assert body["createdAt"] and body["updatedAt"]

    titles = db.execute(select(Task.title).where(Task.owner_id == user.id)).scalars().all()
    assert "Test task text" in titles


def test_create_task_with_invalid_body_is_rejected(client, seed, db):
    resp = client.post("/tasks", headers=_headers(seed.users[0]), json={})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "title"
    assert _task_count(db) == 2


def test_create_task_with_blank_title_is_rejected(client, seed, db):
    resp = client.post("/tasks", headers=_headers(seed.users[0]), json={"title": "   "})
    assert resp.status_code == 400
    assert _task_count(db) == 2


def test_create_task_ignores_owner_and_completion_fields(client, seed):
    me, other = seed.users
    resp = client.post(
        "/tasks",
        headers=_headers(me),
        json={"title": "mine", "ownerId": other.id, "completed": True},
    )
    assert resp.status_code == 200
    assert resp.json()["ownerId"] == me.id
    assert resp.json()["completed"] is False


def test_create_task_requires_auth(client, seed, db):
    resp = client.post("/tasks", json={"title": "anonymous"})
    assert resp.status_code == 401
    assert _task_count(db) == 2


# -----------------------------
# GET /tasks
# -----------------------------

def test_list_tasks_is_scoped_to_owner(client, seed):
    resp = client.get("/tasks", headers=_headers(seed.users[0]))
    assert resp.status_code == 200
    tasks = resp.json()["tasks"]
    assert [t["id"] for t in tasks] == [seed.task_ids[0]]


def test_buy_milk_scenario(client):
    u1 = client.post("/users", json={"email": "u1@x.com", "password": "abcdef"}).headers["x-auth"]
    u2 = client.post("/users", json={"email": "u2@x.com", "password": "abcdef"}).headers["x-auth"]

    assert client.post("/tasks", headers={"x-auth": u1}, json={"title": "buy milk"}).status_code == 200

    mine = client.get("/tasks", headers={"x-auth": u1}).json()["tasks"]
    assert [t["title"] for t in mine] == ["buy milk"]
    assert client.get("/tasks", headers={"x-auth": u2}).json()["tasks"] == []


def test_list_keeps_insertion_order(client, seed):
    user = seed.users[1]
    for title in ("a", "b", "c"):
        client.post("/tasks", headers=_headers(user), json={"title": title})
    titles = [t["title"] for t in client.get("/tasks", headers=_headers(user)).json()["tasks"]]
    assert titles == ["Second test task", "a", "b", "c"]


# -----------------------------
# GET /tasks/{id}
# -----------------------------

def test_get_task(client, seed):
    resp = client.get(f"/tasks/{seed.task_ids[0]}", headers=_headers(seed.users[0]))
    assert resp.status_code == 200
    assert resp.json()["task"]["title"] == "First test task"


def test_get_task_of_other_user_is_404(client, seed):
    resp = client.get(f"/tasks/{seed.task_ids[1]}", headers=_headers(seed.users[0]))
    assert resp.status_code == 404
    assert resp.content == b""


def test_get_missing_task_is_404(client, seed):
    resp = client.get(f"/tasks/{uuid.uuid4().hex}", headers=_headers(seed.users[0]))
    assert resp.status_code == 404


def test_get_malformed_id_is_404(client, seed):
    resp = client.get("/tasks/123", headers=_headers(seed.users[0]))
    assert resp.status_code == 404
    assert resp.content == b""


def test_get_task_accepts_hyphenated_id(client, seed):
    hyphenated = str(uuid.UUID(seed.task_ids[0]))
    resp = client.get(f"/tasks/{hyphenated}", headers=_headers(seed.users[0]))
    assert resp.status_code == 200


# -----------------------------
# DELETE /tasks/{id}
# -----------------------------

def test_delete_task(client, seed):
    owner = seed.users[1]
    task_id = seed.task_ids[1]
    resp = client.delete(f"/tasks/{task_id}", headers=_headers(owner))
    assert resp.status_code == 200
    assert resp.json()["task"]["id"] == task_id

    assert client.get(f"/tasks/{task_id}", headers=_headers(owner)).status_code == 404


def test_delete_task_of_other_user_is_404_and_task_survives(client, seed):
    task_id = seed.task_ids[1]
    resp = client.delete(f"/tasks/{task_id}", headers=_headers(seed.users[0]))
    assert resp.status_code == 404

    resp = client.get(f"/tasks/{task_id}", headers=_headers(seed.users[1]))
    assert resp.status_code == 200


def test_delete_missing_and_malformed_ids_are_404(client, seed):
    headers = _headers(seed.users[1])
    assert client.delete(f"/tasks/{uuid.uuid4().hex}", headers=headers).status_code == 404
    assert client.delete("/tasks/123", headers=headers).status_code == 404


# -----------------------------
# PATCH /tasks/{id}
# -----------------------------

def test_complete_then_reopen_round_trip(client, seed):
    headers = _headers(seed.users[0])
    task_id = seed.task_ids[0]

    resp = client.patch(f"/tasks/{task_id}", headers=headers, json={"title": "Updated", "completed": True})
    assert resp.status_code == 200
    task = resp.json()["task"]
    assert task["title"] == "Updated"
    assert task["completed"] is True
    assert task["completedAt"] is not None

    fetched = client.get(f"/tasks/{task_id}", headers=headers).json()["task"]
    assert fetched["completed"] is True
    assert fetched["completedAt"] is not None

    resp = client.patch(f"/tasks/{task_id}", headers=headers, json={"completed": False})
    task = resp.json()["task"]
    assert task["completed"] is False
    assert task["completedAt"] is None


def test_completing_again_refreshes_completion_time(client, seed):
    headers = _headers(seed.users[0])
    url = f"/tasks/{seed.task_ids[0]}"
    first = client.patch(url, headers=headers, json={"completed": True}).json()["task"]["completedAt"]
    time.sleep(0.01)
    second = client.patch(url, headers=headers, json={"completed": True, "text": "again"}).json()["task"]
    assert second["completed"] is True
    assert second["completedAt"] is not None
    assert second["completedAt"] != first
    assert second["text"] == "again"


def test_completed_accepts_string_true(client, seed):
    resp = client.patch(
        f"/tasks/{seed.task_ids[0]}", headers=_headers(seed.users[0]), json={"completed": "true"}
    )
    assert resp.json()["task"]["completed"] is True


def test_patch_without_completed_clears_completion(client, seed):
    # A patch that leaves out "completed" still resets it
    owner = seed.users[1]
    resp = client.patch(f"/tasks/{seed.task_ids[1]}", headers=_headers(owner), json={"title": "Renamed"})
    assert resp.status_code == 200
    task = resp.json()["task"]
    assert task["title"] == "Renamed"
    assert task["completed"] is False
    assert task["completedAt"] is None


def test_patch_ignores_fields_outside_allow_list(client, seed):
    me, other = seed.users
    resp = client.patch(
        f"/tasks/{seed.task_ids[0]}",
        headers=_headers(me),
        json={"ownerId": other.id, "id": "x", "tags": " home "},
    )
    assert resp.status_code == 200
    task = resp.json()["task"]
    assert task["ownerId"] == me.id
    assert task["id"] == seed.task_ids[0]
    assert task["tags"] == "home"


def test_patch_rejects_blank_title(client, seed):
    resp = client.patch(
        f"/tasks/{seed.task_ids[0]}", headers=_headers(seed.users[0]), json={"title": ""}
    )
    assert resp.status_code == 400


def test_patch_task_of_other_user_is_404_and_unchanged(client, seed):
    task_id = seed.task_ids[1]
    resp = client.patch(f"/tasks/{task_id}", headers=_headers(seed.users[0]), json={"title": "hijacked"})
    assert resp.status_code == 404

    task = client.get(f"/tasks/{task_id}", headers=_headers(seed.users[1])).json()["task"]
    assert task["title"] == "Second test task"
    assert task["completed"] is True


def test_patch_malformed_id_is_404(client, seed):
    resp = client.patch("/tasks/123", headers=_headers(seed.users[0]), json={"completed": True})
    assert resp.status_code == 404


# -----------------------------
# Timestamps
# -----------------------------

def test_timestamps_are_utc_on_create_and_read_back(client, seed):
    headers = _headers(seed.users[0])
    created = client.post(
        "/tasks", headers=headers, json={"title": "dated", "dueDate": "2026-11-01T09:00:00+02:00"}
    ).json()
    fetched = client.get(f"/tasks/{created['id']}", headers=headers).json()["task"]

    for task in (created, fetched):
        assert task["dueDate"] == "2026-11-01T07:00:00Z"
        assert task["createdAt"].endswith("Z")
        assert task["updatedAt"].endswith("Z")
    assert fetched["createdAt"] == created["createdAt"]


def test_completed_at_is_utc(client, seed):
    resp = client.patch(
        f"/tasks/{seed.task_ids[0]}", headers=_headers(seed.users[0]), json={"completed": True}
    )
    assert resp.json()["task"]["completedAt"].endswith("Z")
