from datetime import datetime, timezone

from sabor_arte.services.store import StoreError


def place(client, token, auth_header, total):
    response = client.post(
        "/api/pedidos",
        json={
            "items": [{"item_id": 1, "quantity": 1, "unit_price": total}],
            "total": total,
            "details": {"origem": "app"},
        },
        headers=auth_header(token),
    )
    assert response.status_code == 201
    return response.json()["order"]


def test_newest_first(client, register_user, auth_header):
    token = register_user()
    for total in (10.0, 20.0, 30.0):
        place(client, token, auth_header, total)

    history = client.get("/api/pedidos", headers=auth_header(token)).json()

    assert [order["total"] for order in history] == [30.0, 20.0, 10.0]


def test_only_callers_orders_are_returned(client, store, register_user, auth_header):
    ana = register_user("ana@example.com")
    bia = register_user("bia@example.com", name="Beatriz")
    place(client, ana, auth_header, 10.0)
    place(client, bia, auth_header, 20.0)
    place(client, ana, auth_header, 30.0)

    ana_id = store.tables["perfis"][0]["id"]
    history = client.get("/api/pedidos", headers=auth_header(ana)).json()

    assert len(history) == 2
    assert all(order["user_id"] == ana_id for order in history)


def test_query_parameters_cannot_widen_the_filter(client, store, register_user, auth_header):
    ana = register_user("ana@example.com")
    bia = register_user("bia@example.com", name="Beatriz")
    place(client, bia, auth_header, 20.0)

    bia_id = store.tables["perfis"][1]["id"]
    response = client.get(f"/api/pedidos?user_id={bia_id}", headers=auth_header(ana))

    assert response.status_code == 200
    assert response.json() == []


def test_corrupt_row_fails_the_whole_request(client, store, register_user, auth_header):
    token = register_user()
    place(client, token, auth_header, 10.0)
    store.seed(
        "pedidos",
        [
            {
                "id": 99,
                "user_id": store.tables["perfis"][0]["id"],
                "items_json": "[{not json",
                "details_json": None,
                "total": 5.0,
                "status": "Pendente",
                "created_at": datetime(2020, 1, 1, tzinfo=timezone.utc),
            }
        ],
    )

    response = client.get("/api/pedidos", headers=auth_header(token))

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "DataIntegrityError"
    assert "99" in body["error"]


def test_store_failure(client, store, register_user, auth_header, monkeypatch):
    token = register_user()

    async def failing_select(table, **kwargs):
        raise StoreError("select", table, "connection refused")

    monkeypatch.setattr(store, "select", failing_select)

    response = client.get("/api/pedidos", headers=auth_header(token))

    assert response.status_code == 500
    assert response.json()["code"] == "PersistenceError"
