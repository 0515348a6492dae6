from decimal import Decimal

import pytest
from django.core.cache import cache

from tests.helpers import WEBHOOK_SECRET


@pytest.fixture(autouse=True)
def _isolated(settings):
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    settings.STRIPE_SECRET_KEY = "sk_test_dummy"
    settings.SITE_PASSWORD = "open-sesame"
    settings.CART_READ_RETRY_DELAY = 0
    settings.ORDER_NOTIFICATION_EMAIL = ""
    settings.SUPPORT_TEST_EMAIL = ""
    # order email idempotency lives in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_product(db):
    from catalog.models import Headphone

    def _make(name="Bone+ Headphone", price="199.99", stock=10, image_url="/images/product1.jpg", **extra):
        return Headphone.objects.create(
            name=name, price=Decimal(price), stock_quantity=stock, image_url=image_url, **extra,
        )
    return _make


@pytest.fixture
def product(make_product):
    return make_product()
