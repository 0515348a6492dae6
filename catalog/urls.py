# catalog/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("", views.product_list, name="product_list"),
    path("stock/", views.stock_check, name="stock_check"),
    path("check-stock/", views.check_stock, name="check_stock"),
]
