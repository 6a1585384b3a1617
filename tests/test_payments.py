from types import SimpleNamespace

import pytest
import stripe

from washdesk_shared.services import payment_service
from washdesk_shared.services.payment_providers import PaymentError, get_payment_provider
from washdesk_shared.validation import ValidationError


@pytest.fixture
def sandbox(monkeypatch):
    monkeypatch.setenv("STRIPE_SANDBOX_MODE", "true")


@pytest.fixture
def stripe_down(monkeypatch):
    def fail(*args, **kwargs):
        raise stripe.APIConnectionError("Network error")

    monkeypatch.setattr(stripe.PaymentIntent, "list", fail)


def test_sandbox_payments_come_from_stripe(sandbox):
    result = payment_service.fetch_payments()
    assert result["source"] == "stripe"
    assert [payment["id"] for payment in result["payments"]][:2] == ["pi_mock_1", "pi_mock_2"]
    assert result["payments"][0]["amount"] == 49.99


def test_stripe_failure_falls_back_to_ledger(stripe_down, fake_supabase):
    fake_supabase.seed(
        "payments",
        {"id": "pay-1", "booking_id": "bk-1", "amount": "20.00", "status": "succeeded",
         "provider": "cash"},
        {"id": "pay-2", "booking_id": "bk-2", "amount": 15, "status": "canceled",
         "provider": "Stripe", "provider_txn_id": "pi_9"},
    )
    result = payment_service.fetch_payments()
    assert result["source"] == "ledger"
    assert [payment["id"] for payment in result["payments"]] == ["pay-1"]
    assert result["payments"][0]["amount"] == 20.0


def test_stripe_intents_are_mapped(monkeypatch):
    intent = SimpleNamespace(
        id="pi_1",
        amount=2550,
        status="succeeded",
        created=1717400000,
        metadata={"bookingId": "bk-7"},
    )
    page = SimpleNamespace(data=[intent])
    monkeypatch.setattr(stripe.PaymentIntent, "list", lambda **kwargs: page)

    payments = payment_service.fetch_payments()["payments"]
    assert payments == [
        {
            "id": "pi_1",
            "booking_id": "bk-7",
            "amount": 25.5,
            "status": "succeeded",
            "provider": "Stripe",
            "provider_txn_id": "pi_1",
            "created_at": "2024-06-03T07:33:20+00:00",
        }
    ]


def test_missing_stripe_key_raises(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "")
    with pytest.raises(PaymentError):
        get_payment_provider("stripe").list_payments()


def test_unknown_provider():
    with pytest.raises(PaymentError, match="not supported"):
        get_payment_provider("paypal")


def test_only_payment_intents_can_be_refunded():
    with pytest.raises(ValidationError):
        payment_service.refund_payment("pay-1")


def test_refund_marks_ledger_rows(sandbox, fake_supabase):
    fake_supabase.seed(
        "payments",
        {"id": "pay-1", "amount": 49.99, "status": "succeeded", "provider_txn_id": "pi_mock_1"},
    )
    refund = payment_service.refund_payment("pi_mock_1", 10.005)

    assert refund["amount"] == 1001
    assert refund["ledger_updated"] is True
    assert fake_supabase.tables["payments"][0]["status"] == "refunded"


def test_refund_route_requires_general_admin(sandbox, client, admins, auth_headers):
    url = "/admin/api/payments/pi_mock_1/refund"
    owner = client.post(url, headers=auth_headers(admins.franchise))
    general = client.post(url, headers=auth_headers(admins.general))
    assert owner.status_code == 403
    assert general.status_code == 200
    assert general.get_json()["message"] == "Refund issued"


def test_payment_lookup_falls_back_to_ledger(client, admins, auth_headers, fake_supabase):
    fake_supabase.seed("payments", {"id": "pay-3", "amount": 5, "status": "pending"})
    found = client.get("/admin/api/payments/pay-3", headers=auth_headers(admins.general))
    missing = client.get("/admin/api/payments/pay-4", headers=auth_headers(admins.general))
    assert found.get_json()["data"]["booking_id"] == "N/A"
    assert missing.status_code == 404
