# support/admin_urls.py: mounted under /api/admin/messages/
from django.urls import path
from . import views

urlpatterns = [
    path("", views.message_list, name="admin_messages"),
    path("<int:pk>/status/", views.message_status, name="admin_message_status"),
    path("<int:pk>/respond/", views.message_respond, name="admin_message_respond"),
]
