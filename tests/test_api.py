"""
Tests for the HTTP surface
"""
from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from dateutil.tz import tzutc
from fastapi.testclient import TestClient

from pbank.main import create_app
from pbank.services.tokens import TokenIssuer

API = "/api/v1"


@pytest.fixture
def client(settings):
    app = create_app(settings.model_copy(update={"SEED_DEMO": True}))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def token(client):
    response = client.post(f"{API}/login", json={"username": "admin", "password": "fake"})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def stock_id(client, auth):
    return client.get(f"{API}/stocks/TEST", headers=auth).json()["id"]


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json() == {"status": True}


def test_login_failures_are_indistinguishable(client):
    wrong_password = client.post(f"{API}/login", json={"username": "admin", "password": "nope"})
    unknown_user = client.post(f"{API}/login", json={"username": "ghost", "password": "fake"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["code"] == "invalid_credentials"


def test_protected_route_requires_token(client):
    response = client.get(f"{API}/transactions")
    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_wrong_auth_scheme(client, token):
    response = client.get(f"{API}/transactions", headers={"Authorization": f"Token {token}"})
    assert response.status_code == 401


def test_expired_and_garbage_tokens_get_same_response(client, settings):
    stale_clock = lambda: datetime.now(tzutc()) - timedelta(hours=2)
    expired = TokenIssuer(settings.JWT_SECRET, ttl=timedelta(hours=1), now=stale_clock).issue(
        SimpleNamespace(id=uuid4(), username="admin")
    )

    expired_response = client.get(f"{API}/transactions", headers={"Authorization": f"Bearer {expired}"})
    garbage_response = client.get(f"{API}/transactions", headers={"Authorization": "Bearer garbage"})

    assert expired_response.status_code == garbage_response.status_code == 401
    assert expired_response.json() == garbage_response.json()


def test_get_stock(client, auth):
    response = client.get(f"{API}/stocks/TEST", headers=auth)
    assert response.status_code == 200
    body = response.json()
    assert body["symbol"] == "TEST"
    assert body["price"] == 42.0


def test_get_unknown_stock(client, auth):
    response = client.get(f"{API}/stocks/NOPE", headers=auth)
    assert response.status_code == 404
    assert response.json()["code"] == "stock_not_found"


def test_trading_scenario(client, auth, stock_id):
    bought = client.post(f"{API}/buy", headers=auth, json={"stock_id": stock_id, "quantity": 10})
    assert bought.status_code == 200
    assert bought.json()["transaction_type"] == "buy"
    assert client.get(f"{API}/holdings/{stock_id}", headers=auth).json()["quantity"] == 10

    oversold = client.post(f"{API}/sell", headers=auth, json={"stock_id": stock_id, "quantity": 15})
    assert oversold.status_code == 409
    assert oversold.json()["code"] == "insufficient_holdings"
    assert client.get(f"{API}/holdings/{stock_id}", headers=auth).json()["quantity"] == 10

    sold = client.post(f"{API}/sell", headers=auth, json={"stock_id": stock_id, "quantity": 10})
    assert sold.status_code == 200
    assert client.get(f"{API}/holdings/{stock_id}", headers=auth).json()["quantity"] == 0

    history = client.get(f"{API}/transactions", headers=auth).json()
    assert [t["id"] for t in history] == [bought.json()["id"], sold.json()["id"]]
    assert [t["transaction_type"] for t in history] == ["buy", "sell"]


def test_holdings_list(client, auth, stock_id):
    client.post(f"{API}/buy", headers=auth, json={"stock_id": stock_id, "quantity": 3})

    holdings = client.get(f"{API}/holdings", headers=auth).json()
    assert holdings == [{"stock_id": stock_id, "symbol": "TEST", "quantity": 3}]


def test_invalid_quantity(client, auth, stock_id):
    response = client.post(f"{API}/buy", headers=auth, json={"stock_id": stock_id, "quantity": 0})
    assert response.status_code == 422
    assert response.json()["code"] == "invalid_quantity"


def test_buy_unknown_stock(client, auth):
    response = client.post(f"{API}/buy", headers=auth, json={"stock_id": str(uuid4()), "quantity": 1})
    assert response.status_code == 404
    assert response.json()["code"] == "stock_not_found"


def test_oversized_quantity(client, auth, stock_id):
    response = client.post(f"{API}/buy", headers=auth, json={"stock_id": stock_id, "quantity": 10**20})
    assert response.status_code == 422
    assert response.json()["code"] == "invalid_quantity"


def test_startup_configures_logging(settings, monkeypatch):
    levels = []
    monkeypatch.setattr("pbank.main.setup_logging", levels.append)

    with TestClient(create_app(settings.model_copy(update={"LOG_LEVEL": "DEBUG"}))):
        pass

    assert levels == ["DEBUG"]
