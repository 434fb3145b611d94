import pytest

from app.core import payment_client
from app.core.config import settings
from app.core.payment_client import CheckoutSession


@pytest.fixture
def stripe_sessions(monkeypatch):
    sessions = {}

    async def fake_create(amount, message, user_id):
        session = CheckoutSession(id=f"cs_test_{len(sessions) + 1}", url="https://checkout.example/pay")
        sessions[session.id] = {"amount": amount, "user_id": user_id, "payment_status": "unpaid"}
        return session

    async def fake_retrieve(session_id):
        data = sessions[session_id]
        return CheckoutSession(
            id=session_id,
            payment_status=data["payment_status"],
            amount_total=round(data["amount"] * 100),
        )

    monkeypatch.setattr(payment_client, "create_checkout_session", fake_create)
    monkeypatch.setattr(payment_client, "retrieve_checkout_session", fake_retrieve)
    return sessions


async def test_checkout_then_status(client, headers_for, stripe_sessions):
    headers = headers_for("donor")

    response = await client.post("/api/donations/checkout", json={"amount": 25.5, "message": "Buen Camino"}, headers=headers)
    assert response.status_code == 200
    checkout = response.json()
    assert checkout["url"] == "https://checkout.example/pay"
    assert stripe_sessions["cs_test_1"]["user_id"] == "donor"

    status = (await client.get("/api/donations/status/cs_test_1", headers=headers)).json()
    assert status == {"status": "unpaid", "amount": 25.5}

    stripe_sessions["cs_test_1"]["payment_status"] = "paid"
    status = (await client.get("/api/donations/status/cs_test_1", headers=headers)).json()
    assert status["status"] == "paid"


async def test_status_rejects_malformed_session_id(client, headers_for, stripe_sessions):
    response = await client.get("/api/donations/status/pi_123", headers=headers_for("donor"))
    assert response.status_code == 400


async def test_amount_must_be_positive(client, headers_for, stripe_sessions):
    response = await client.post("/api/donations/checkout", json={"amount": 0}, headers=headers_for("donor"))
    assert response.status_code == 422


async def test_payments_not_configured(client, headers_for, monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", None)
    monkeypatch.setattr(settings, "STRIPE_PUBLISHABLE_KEY", None)

    assert (await client.get("/api/stripe/publishable-key")).status_code == 503
    response = await client.post("/api/donations/checkout", json={"amount": 10}, headers=headers_for("donor"))
    assert response.status_code == 503


async def test_publishable_key(client, monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_PUBLISHABLE_KEY", "pk_test_123")
    assert (await client.get("/api/stripe/publishable-key")).json() == {"publishable_key": "pk_test_123"}
