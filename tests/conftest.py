import pytest
from fastapi.testclient import TestClient

from sabor_arte.core.config import Settings
from sabor_arte.main import create_app
from sabor_arte.services import BackendServices
from sabor_arte.services.auth import MockAuthService
from sabor_arte.services.store import MockRowStore

MENU_ROWS = [
    {"id": 1, "name": "Suco de Laranja", "description": "300 ml", "price": 9.0, "category": "Bebidas"},
    {"id": 2, "name": "Pão de Queijo", "description": None, "price": 6.5, "category": None},
    {"id": 3, "name": "Água com Gás", "description": None, "price": 5.0, "category": "Bebidas"},
]


@pytest.fixture()
def settings():
    return Settings(_env_file=None, env_mode="development")


@pytest.fixture()
def auth():
    return MockAuthService()


@pytest.fixture()
def store():
    return MockRowStore(seed={"menu": MENU_ROWS})


@pytest.fixture()
def client(settings, auth, store):
    app = create_app(settings, BackendServices(auth=auth, store=store))
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def register_user(client):
    """Register an account and return its session token."""

    def _register(email="ana@example.com", password="secret1", name="Ana Souza"):
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        return response.json()["token"]

    return _register


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_header():
    return bearer
