"""
Tests for the guest facing dining table endpoints
"""
from unittest.mock import AsyncMock, patch


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "TableCall API"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_get_table(client, dining_table):
    response = client.get(f"/api/dining_tables/{dining_table.id}")

    assert response.status_code == 200
    data = response.json()
    assert data == {
        "id": dining_table.id,
        "code": "7",
        "name": "Terraza",
        "description": "Near the window",
        "needs_attention": False,
    }


def test_get_table_not_found(client):
    response = client.get("/api/dining_tables/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Table not found"


def test_get_table_by_code(client, dining_table):
    response = client.get("/api/dining_tables/by_code/7")
    assert response.status_code == 200
    assert response.json()["id"] == dining_table.id


def test_get_table_by_code_not_found(client):
    response = client.get("/api/dining_tables/by_code/ZZ")
    assert response.status_code == 404


def test_guest_calls_waiter(client, dining_table):
    with patch("api.routers.dining_tables.publish_table_update", new_callable=AsyncMock) as publish:
        response = client.patch(
            f"/api/dining_tables/{dining_table.id}",
            json={"needs_attention": True}
        )

    assert response.status_code == 200
    assert response.json()["needs_attention"] is True
    publish.assert_awaited_once()
    assert publish.await_args.args[0].id == dining_table.id

    # Persisted
    assert client.get(f"/api/dining_tables/{dining_table.id}").json()["needs_attention"] is True


def test_repeat_call_is_idempotent(client, dining_table):
    for _ in range(2):
        response = client.patch(
            f"/api/dining_tables/{dining_table.id}",
            json={"needs_attention": True}
        )
        assert response.status_code == 200
        assert response.json()["needs_attention"] is True


def test_guest_cannot_clear_call(client, dining_table):
    client.patch(f"/api/dining_tables/{dining_table.id}", json={"needs_attention": True})

    response = client.patch(
        f"/api/dining_tables/{dining_table.id}",
        json={"needs_attention": False}
    )

    assert response.status_code == 403
    assert client.get(f"/api/dining_tables/{dining_table.id}").json()["needs_attention"] is True


def test_staff_can_clear_call(client, dining_table, staff_headers):
    client.patch(f"/api/dining_tables/{dining_table.id}", json={"needs_attention": True})

    response = client.patch(
        f"/api/dining_tables/{dining_table.id}",
        json={"needs_attention": False},
        headers=staff_headers
    )

    assert response.status_code == 200
    assert response.json()["needs_attention"] is False


def test_call_unknown_table(client):
    response = client.patch("/api/dining_tables/999", json={"needs_attention": True})
    assert response.status_code == 404
