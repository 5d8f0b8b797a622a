# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseDetailView,
    PurchaseListCreateView,
    PurchaseRepostView,
    PurchaseStatusView,
)

urlpatterns = [
    path("", PurchaseListCreateView.as_view(), name="purchases"),
    path("<int:purchase_id>/", PurchaseDetailView.as_view(), name="purchase-detail"),
    path("<int:purchase_id>/status/", PurchaseStatusView.as_view(), name="purchase-status"),
    path("<int:purchase_id>/repost/", PurchaseRepostView.as_view(), name="purchase-repost"),
]
