# File: tests/test_health.py

"""
Basic smoke tests. To run:
    pytest -q
"""


def test_health_endpoint(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_openapi_lists_routes(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert "/users" in paths
    assert "/users/login" in paths
    assert "/users/me/token" in paths
    assert "/tasks/{task_id}" in paths
