import json
from decimal import Decimal

import pytest

from cart.models import CartItem, CartSession
from payment import gateway
from payment.models import Order, OrderItem, Payment
from tests.helpers import event_payload, intent_dict, stripe_signature

pytestmark = pytest.mark.django_db

WEBHOOK_URL = "/api/stripe/webhook/"
INTENT_URL = "/api/stripe/payment-intent/"
VERIFY_URL = "/api/payment-verify/"


@pytest.fixture
def created_intents(monkeypatch):
    calls = []

    def fake_create(amount_cents, currency, metadata, receipt_email=""):
        calls.append({
            "amount": amount_cents, "currency": currency,
            "metadata": metadata, "receipt_email": receipt_email,
        })
        return {"id": "pi_new", "client_secret": "pi_new_secret_abc", "amount": amount_cents}

    monkeypatch.setattr(gateway, "create_payment_intent", fake_create)
    return calls


@pytest.fixture
def stripe_intent(monkeypatch):
    """Make retrieve_payment_intent return whatever the test assigns to holder['intent']."""
    holder = {"intent": None}
    monkeypatch.setattr(gateway, "retrieve_payment_intent", lambda intent_id: holder["intent"])
    return holder


def _post_event(client, event_type, intent, secret=None):
    payload = event_payload(event_type, intent)
    sig = stripe_signature(payload) if secret is None else stripe_signature(payload, secret)
    return client.post(WEBHOOK_URL, data=payload, content_type="application/json",
                       HTTP_STRIPE_SIGNATURE=sig)


def _line(product, qty, price=None):
    return {"id": product.pk, "name": product.name, "quantity": qty,
            "price": price or str(product.price)}


class TestCreatePaymentIntent:
    def test_prices_from_catalogue(self, client, product, created_intents):
        resp = client.post(
            INTENT_URL,
            {"items": [{"id": product.pk, "quantity": 2, "price": "0.01"}], "email": "a@b.com"},
            content_type="application/json",
        )
        assert resp.status_code == 200
        assert resp.json() == {"clientSecret": "pi_new_secret_abc", "paymentIntentId": "pi_new", "amount": 39998}

        call = created_intents[0]
        assert call["amount"] == 39998
        assert call["currency"] == "usd"
        assert call["receipt_email"] == "a@b.com"
        assert json.loads(call["metadata"]["order_items"]) == [
            {"id": product.pk, "name": "Bone+ Headphone", "quantity": 2, "price": "199.99"},
        ]

    def test_falls_back_to_server_cart(self, client, product, created_intents):
        session = CartSession.objects.create(user_identifier="sess-1")
        CartItem.objects.create(session=session, product=product, quantity=3)

        resp = client.post(INTENT_URL, {"sessionId": "sess-1"}, content_type="application/json")

        assert resp.status_code == 200
        assert resp.json()["amount"] == 59997
        assert created_intents[0]["metadata"]["cart_session"] == "sess-1"

    def test_empty_cart(self, client, created_intents):
        resp = client.post(INTENT_URL, {"items": []}, content_type="application/json")
        assert resp.status_code == 400
        assert resp.json() == {"error": "No items in cart"}
        assert created_intents == []

    def test_insufficient_stock(self, client, make_product, created_intents):
        p = make_product(stock=1)
        resp = client.post(INTENT_URL, {"items": [{"id": p.pk, "quantity": 2}]},
                           content_type="application/json")
        assert resp.status_code == 400
        assert resp.json()["error"] == "Insufficient stock"
        assert created_intents == []

    def test_repeated_lines_are_checked_as_one(self, client, make_product, created_intents):
        p = make_product(stock=5)
        resp = client.post(
            INTENT_URL,
            {"items": [{"id": p.pk, "quantity": 3}, {"id": p.pk, "quantity": 3}]},
            content_type="application/json",
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Insufficient stock", "available": 5, "requested": 6,
                               "name": "Bone+ Headphone"}
        assert created_intents == []

    def test_repeated_lines_are_merged_in_metadata(self, client, product, created_intents):
        resp = client.post(
            INTENT_URL,
            {"items": [{"id": product.pk, "quantity": 1}, {"product_id": product.pk, "quantity": 2}]},
            content_type="application/json",
        )
        assert resp.status_code == 200
        assert resp.json()["amount"] == 59997
        lines = json.loads(created_intents[0]["metadata"]["order_items"])
        assert [(l["id"], l["quantity"]) for l in lines] == [(product.pk, 3)]

    def test_numeric_session_id(self, client, product, created_intents):
        session = CartSession.objects.create(user_identifier="42")
        CartItem.objects.create(session=session, product=product, quantity=1)

        resp = client.post(INTENT_URL, {"sessionId": 42, "email": 7}, content_type="application/json")

        assert resp.status_code == 200
        assert created_intents[0]["metadata"]["cart_session"] == "42"

    def test_numeric_session_id_without_cart(self, client, created_intents):
        resp = client.post(INTENT_URL, {"sessionId": 42}, content_type="application/json")
        assert resp.status_code == 400
        assert resp.json() == {"error": "No items in cart"}

    def test_gateway_failure(self, client, product, monkeypatch):
        def boom(*args, **kwargs):
            raise gateway.GatewayError("Your card was declined.")

        monkeypatch.setattr(gateway, "create_payment_intent", boom)
        resp = client.post(INTENT_URL, {"items": [{"id": product.pk, "quantity": 1}]},
                           content_type="application/json")
        assert resp.status_code == 502
        assert resp.json() == {"error": "Your card was declined."}


class TestWebhook:
    def test_missing_signature(self, client):
        resp = client.post(WEBHOOK_URL, data=b"{}", content_type="application/json")
        assert resp.status_code == 400
        assert resp.json() == {"error": "No stripe signature found"}

    def test_bad_signature(self, client, product):
        resp = _post_event(client, "payment_intent.succeeded",
                           intent_dict(items=[_line(product, 1)]), secret="whsec_wrong")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid signature"}
        assert not Order.objects.exists()

    def test_succeeded_records_paid_order(self, client, make_product, mailoutbox,
                                          django_capture_on_commit_callbacks):
        p = make_product(stock=5)
        session = CartSession.objects.create(user_identifier="sess-9")
        CartItem.objects.create(session=session, product=p, quantity=2)
        intent = intent_dict(items=[_line(p, 2)], metadata={"cart_session": "sess-9"})

        with django_capture_on_commit_callbacks(execute=True):
            resp = _post_event(client, "payment_intent.succeeded", intent)

        assert resp.status_code == 200
        assert resp.json() == {"received": True, "type": "payment_intent.succeeded"}

        order = Order.objects.get(payment_intent_id="pi_123")
        assert order.status == "paid"
        assert order.total_price == Decimal("399.98")
        assert order.email == "buyer@example.com"
        item = OrderItem.objects.get(order=order)
        assert (item.product_id, item.quantity, item.price_at_time) == (p.pk, 2, Decimal("199.99"))
        assert order.payment.payment_status == "succeeded"
        assert order.payment.amount_received == Decimal("399.98")

        p.refresh_from_db()
        assert p.stock_quantity == 3
        assert not CartItem.objects.filter(session=session).exists()

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ["buyer@example.com"]
        assert order.display_number in mailoutbox[0].subject
        assert "2 x Bone+ Headphone @ $199.99 = $399.98" in mailoutbox[0].body

    def test_redelivery_is_idempotent(self, client, product, mailoutbox,
                                      django_capture_on_commit_callbacks):
        intent = intent_dict(items=[_line(product, 1)])
        with django_capture_on_commit_callbacks(execute=True):
            _post_event(client, "payment_intent.succeeded", intent)
            resp = _post_event(client, "payment_intent.succeeded", intent)

        assert resp.status_code == 200
        assert Order.objects.count() == 1
        assert Payment.objects.count() == 1
        product.refresh_from_db()
        assert product.stock_quantity == 9
        assert len(mailoutbox) == 1

    def test_quoted_price_wins_over_catalogue_change(self, client, product):
        intent = intent_dict(items=[_line(product, 1, price="149.00")], amount=14900)
        product.price = Decimal("249.00")
        product.save()

        _post_event(client, "payment_intent.succeeded", intent)

        assert OrderItem.objects.get().price_at_time == Decimal("149.00")

    def test_currency_falls_back_to_current_setting(self, client, product, settings):
        settings.PAYMENT_CURRENCY = "EUR"
        intent = intent_dict(items=[_line(product, 1)], amount=19999, currency=None)

        _post_event(client, "payment_intent.succeeded", intent)

        assert Order.objects.get().currency == "eur"

    def test_stock_never_goes_negative(self, client, make_product):
        p = make_product(stock=1)
        _post_event(client, "payment_intent.succeeded", intent_dict(items=[_line(p, 3)]))
        p.refresh_from_db()
        assert p.stock_quantity == 0

    def test_staff_notification(self, client, product, settings, mailoutbox,
                                django_capture_on_commit_callbacks):
        settings.ORDER_NOTIFICATION_EMAIL = "orders@boneplus.test"
        with django_capture_on_commit_callbacks(execute=True):
            _post_event(client, "payment_intent.succeeded", intent_dict(items=[_line(product, 1)]))

        subjects = [m.subject for m in mailoutbox]
        assert any(s.startswith("[New Paid Order] BP-") for s in subjects)

    def test_payment_failed_marks_pending_order(self, client):
        order = Order.objects.create(payment_intent_id="pi_fail", status="pending")
        resp = _post_event(client, "payment_intent.payment_failed",
                           intent_dict(intent_id="pi_fail", status="requires_payment_method"))
        assert resp.status_code == 200
        order.refresh_from_db()
        assert order.status == "failed"

    def test_other_events_are_acknowledged(self, client):
        resp = _post_event(client, "charge.refunded", {"id": "ch_1"})
        assert resp.status_code == 200
        assert resp.json() == {"received": True, "type": "charge.refunded"}


class TestVerify:
    def test_requires_intent_id(self, client):
        resp = client.get(VERIFY_URL)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Payment intent ID is required"}

    def test_unknown_intent(self, client, stripe_intent):
        resp = client.get(VERIFY_URL, {"payment_intent": "pi_missing"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Payment intent not found"}

    def test_pending_intent_without_order(self, client, stripe_intent):
        stripe_intent["intent"] = intent_dict(intent_id="pi_wait", status="processing")
        resp = client.get(VERIFY_URL, {"payment_intent": "pi_wait"})
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Order not found", "paymentStatus": "processing"}

    def test_records_order_when_webhook_is_late(self, client, product, stripe_intent):
        stripe_intent["intent"] = intent_dict(intent_id="pi_late", items=[_line(product, 2)])

        resp = client.get(VERIFY_URL, {"payment_intent": "pi_late"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["order"]["status"] == "paid"
        assert body["order"]["total_price"] == "399.98"
        assert body["order"]["created_by_verification"] is True
        assert body["order"]["items"][0]["quantity"] == 2
        assert Order.objects.get().created_by_verification is True

    def test_webhook_then_verify_keeps_single_order(self, client, product, stripe_intent):
        intent = intent_dict(intent_id="pi_both", items=[_line(product, 1)])
        _post_event(client, "payment_intent.succeeded", intent)
        stripe_intent["intent"] = intent

        resp = client.get(VERIFY_URL, {"payment_intent": "pi_both"})

        assert resp.status_code == 200
        assert resp.json()["order"]["created_by_verification"] is False
        assert Order.objects.count() == 1

    def test_reconciles_pending_order(self, client, stripe_intent):
        order = Order.objects.create(payment_intent_id="pi_sync", status="pending", total_price=Decimal("10.00"))
        Payment.objects.create(order=order, stripe_payment_id="pi_sync", payment_status="pending")
        stripe_intent["intent"] = intent_dict(intent_id="pi_sync", amount=1000)

        resp = client.get(VERIFY_URL, {"payment_intent": "pi_sync"})

        assert resp.status_code == 200
        order.refresh_from_db()
        assert order.status == "paid"
        assert order.payment.payment_status == "succeeded"
        assert resp.json()["order"]["payment_status"] == "succeeded"
