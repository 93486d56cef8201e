import pytest

from sabor_arte.flows.gateway import parse_bearer_token

ORDER = {
    "items": [{"item_id": 1, "quantity": 1, "unit_price": 9.0}],
    "total": 9.0,
    "details": {"observacao": "sem gelo"},
}

FINALIZE = {
    "name": "Ana Souza",
    "phone": "11 99999-0000",
    "address": "Rua das Flores, 10",
    "payment": "pix",
    "items": [{"item_id": 1, "quantity": 1, "unit_price": 9.0}],
    "total": 9.0,
}


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc123", "abc123"),
        ("bearer abc123", "abc123"),
        ("  Bearer   abc123  ", "abc123"),
        ("Bearer", None),
        ("Bearer   ", None),
        ("Basic abc123", None),
        ("abc123", None),
    ],
)
def test_parse_bearer_token(header, expected):
    assert parse_bearer_token(header) == expected


class TestMissingToken:
    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("post", "/api/pedidos", ORDER),
            ("post", "/api/finalizar", FINALIZE),
            ("get", "/api/pedidos", None),
        ],
    )
    def test_rejected_before_any_call(self, client, auth, store, method, path, body):
        kwargs = {"json": body} if body is not None else {}
        response = getattr(client, method)(path, **kwargs)

        assert response.status_code == 401
        assert response.json()["code"] == "Unauthenticated"
        assert store.calls == []
        assert auth.calls == []

    def test_other_scheme_counts_as_missing(self, client, auth, store):
        response = client.get("/api/pedidos", headers={"Authorization": "Basic YW5hOnNlY3JldA=="})

        assert response.status_code == 401
        assert response.json()["code"] == "Unauthenticated"
        assert auth.calls == []

    def test_missing_token_wins_over_invalid_body(self, client, store):
        response = client.post("/api/pedidos", json={"items": [], "total": 0})

        assert response.status_code == 401
        assert response.json()["code"] == "Unauthenticated"
        assert store.calls == []


class TestInvalidToken:
    def test_unknown_token(self, client, store, auth_header):
        response = client.get("/api/pedidos", headers=auth_header("not-a-real-token"))

        assert response.status_code == 401
        body = response.json()
        assert body["code"] == "InvalidCredential"
        assert body["success"] is False
        assert store.calls == []

    def test_expired_token(self, client, auth, store, register_user, auth_header):
        token = register_user()
        auth.expire_session(token)
        store.calls.clear()

        response = client.get("/api/pedidos", headers=auth_header(token))

        assert response.status_code == 401
        assert response.json()["code"] == "InvalidCredential"
        assert store.count("select") == 0

    def test_expired_token_cannot_order(self, client, auth, store, register_user, auth_header):
        token = register_user()
        auth.expire_session(token)

        response = client.post("/api/pedidos", json=ORDER, headers=auth_header(token))

        assert response.status_code == 401
        assert store.count("insert", "pedidos") == 0


class TestValidToken:
    def test_token_reaches_handler(self, client, register_user, auth_header):
        token = register_user()

        response = client.get("/api/pedidos", headers=auth_header(token))

        assert response.status_code == 200
        assert response.json() == []

    def test_public_routes_need_no_token(self, client, auth):
        assert client.get("/api/menu").status_code == 200
        assert ("get_user", None) not in auth.calls
