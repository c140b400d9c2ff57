import json
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import Payment
from app.services.payments import PaymentService
from app.services.paystack import paystack_client
from app.utils.time import utcnow

API = "/api/v1"


@pytest.fixture
def paystack(monkeypatch):
    """Replace the Paystack verify call with a canned transaction"""
    transactions = {}

    async def fake_verify(reference):
        return transactions.get(reference, {"status": False, "message": "Transaction not found"})

    monkeypatch.setattr(paystack_client, "verify_transaction", fake_verify)
    return transactions


def charge(user_id, amount=999900, plan="monthly", status="success", reference="ref-1"):
    return {
        "status": True,
        "data": {
            "reference": reference,
            "status": status,
            "amount": amount,
            "metadata": {"userId": str(user_id), "plan": plan},
        },
    }


def post_webhook(client, event, signature=None):
    raw = json.dumps(event).encode()
    return client.post(
        f"{API}/payments/webhook",
        content=raw,
        headers={
            "Content-Type": "application/json",
            "x-paystack-signature": signature if signature is not None else paystack_client.sign(raw),
        },
    )


def test_expired_subscription_reads_as_free(client, db, user, user_headers):
    user.is_premium = True
    user.subscription_plan = "monthly"
    user.subscription_expires_at = utcnow() - timedelta(hours=1)
    db.commit()

    body = client.get(f"{API}/payments/subscription-status", headers=user_headers).json()

    assert body["isPremium"] is False
    assert body["subscriptionPlan"] == "none"
    assert body["daysRemaining"] == 0
    assert body["isActive"] is False


def test_verify_activates_monthly_plan(client, db, user, user_headers, paystack):
    paystack["ref-1"] = charge(user.id)

    response = client.post(f"{API}/payments/verify/ref-1", headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["isPremium"] is True
    assert body["subscriptionPlan"] == "monthly"
    assert body["alreadyProcessed"] is False

    status = client.get(f"{API}/payments/subscription-status", headers=user_headers).json()
    assert status["isActive"] is True
    assert 28 <= status["daysRemaining"] <= 31


def test_verify_replay_does_not_extend(client, db, user, user_headers, paystack):
    paystack["ref-1"] = charge(user.id)
    first = client.post(f"{API}/payments/verify/ref-1", headers=user_headers).json()
    second = client.post(f"{API}/payments/verify/ref-1", headers=user_headers).json()

    assert second["alreadyProcessed"] is True
    assert second["subscriptionExpiresAt"] == first["subscriptionExpiresAt"]
    assert db.query(Payment).filter(Payment.reference == "ref-1").count() == 1


@pytest.mark.parametrize(
    "transaction, message",
    [
        ({"status": False}, "Payment verification failed"),
        ("failed", "Payment was not successful"),
        ("short", "Payment amount mismatch"),
        ("stranger", "User mismatch - payment does not match your account"),
    ],
)
def test_verify_rejections(client, user, user_headers, paystack, transaction, message):
    if transaction == "failed":
        transaction = charge(user.id, status="failed")
    elif transaction == "short":
        transaction = charge(user.id, amount=100)
    elif transaction == "stranger":
        transaction = charge(user.id + 1000)
    paystack["ref-x"] = transaction

    response = client.post(f"{API}/payments/verify/ref-x", headers=user_headers)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "PAYMENT_ERROR"
    assert error["message"] == message


def test_webhook_bad_signature_is_rejected(client, db, user):
    response = post_webhook(client, {"event": "charge.success", **charge(user.id)}, signature="forged")

    assert response.status_code == 400
    db.refresh(user)
    assert user.is_premium is False


def test_webhook_charge_success_activates_once(client, db, user):
    event = {"event": "charge.success", "data": charge(user.id, plan="annual", amount=9999900)["data"]}

    first = post_webhook(client, event)
    replay = post_webhook(client, event)

    assert first.status_code == 200
    assert replay.json()["alreadyProcessed"] is True
    db.refresh(user)
    assert user.is_premium is True
    assert user.subscription_plan == "annual"
    assert user.last_payment_amount == 99999


def test_webhook_without_user_id_is_rejected(client):
    event = {"event": "charge.success", "data": {"reference": "r", "amount": 999900, "metadata": {}}}

    assert post_webhook(client, event).status_code == 400


def test_webhook_failed_charge_is_recorded(client, db, user):
    event = {"event": "charge.failed", "data": charge(user.id, status="failed")["data"]}

    response = post_webhook(client, event)

    assert response.status_code == 200
    payment = db.query(Payment).filter(Payment.user_id == user.id).one()
    assert payment.status == "failed"


def test_unknown_webhook_events_are_acknowledged(client):
    assert post_webhook(client, {"event": "transfer.success", "data": {}}).status_code == 200


def test_cancel_subscription(client, db, user, user_headers):
    user.is_premium = True
    user.subscription_plan = "monthly"
    user.subscription_expires_at = utcnow() + timedelta(days=10)
    db.commit()

    response = client.post(f"{API}/payments/cancel-subscription", headers=user_headers)

    assert response.status_code == 200
    db.refresh(user)
    assert user.is_premium is False
    assert user.subscription_expires_at is None
    assert [p.status for p in user.payments] == ["cancelled"]


def test_paystack_config_is_public(client):
    body = client.get(f"{API}/config/paystack").json()

    assert body["amounts"] == {"monthly": 9999, "annual": 99999}
    assert body["currency"] == "NGN"


def test_successful_reference_is_unique(db, user):
    db.add(Payment(user_id=user.id, reference="ref-1", status="failed"))
    db.add(Payment(user_id=user.id, reference="ref-1", status="success"))
    db.commit()

    db.add(Payment(user_id=user.id, reference="ref-1", status="success"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_concurrent_activation_extends_once(db, user, monkeypatch):
    # Both requests pass the read check before either has committed
    monkeypatch.setattr(PaymentService, "is_processed", staticmethod(lambda db, reference: False))
    started = datetime(2025, 3, 1, 12)

    first = PaymentService.activate_premium(db, user.id, "monthly", "ref-1", 9999, now=started)
    second = PaymentService.activate_premium(
        db, user.id, "monthly", "ref-1", 9999, now=started + timedelta(days=1)
    )

    assert first.already_processed is False
    assert second.already_processed is True
    db.refresh(user)
    assert user.subscription_started_at == started
    success = db.query(Payment).filter(Payment.reference == "ref-1", Payment.status == "success")
    assert success.count() == 1


def test_webhook_charge_without_reference_is_rejected(client, db, user):
    data = charge(user.id)["data"]
    del data["reference"]

    response = post_webhook(client, {"event": "charge.success", "data": data})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PAYMENT_ERROR"
    db.refresh(user)
    assert user.is_premium is False


@pytest.mark.parametrize(
    "event",
    [[], "charge.success", {"event": "charge.success", "data": ["ref-1"]}],
)
def test_webhook_rejects_payloads_that_are_not_objects(client, event):
    response = post_webhook(client, event)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PAYMENT_ERROR"
