# access/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("verify-password/", views.verify_password, name="verify_password"),
    path("admin/login/",     views.admin_login,     name="admin_login"),
    path("admin/logout/",    views.admin_logout,    name="admin_logout"),
]
