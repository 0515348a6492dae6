# boneplus/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),

    # ---- STOREFRONT ----
    path("api/products/", include("catalog.urls")),
    path("api/cart/", include("cart.urls")),
    path("api/contact/", include("support.urls")),

    # ---- CHECKOUT (Stripe) ----
    path("api/", include("payment.urls")),

    # ---- GATES + ADMIN INBOX ----
    path("api/", include("access.urls")),
    path("api/admin/messages/", include("support.admin_urls")),
]
