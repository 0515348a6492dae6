# payment/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("stripe/payment-intent/", views.create_payment_intent, name="stripe_payment_intent"),
    path("stripe/webhook/",        views.stripe_webhook,        name="stripe_webhook"),
    path("payment-verify/",        views.payment_verify,        name="payment_verify"),
]
