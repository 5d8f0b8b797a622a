# companies/urls.py

from django.urls import path

from companies.views import CurrentSessionView

urlpatterns = [
    path("session/", CurrentSessionView.as_view(), name="current-session"),
]
