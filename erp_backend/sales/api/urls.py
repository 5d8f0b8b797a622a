# sales/api/urls.py

"""
SALES API URLS (CANONICAL)

Provides:
    GET  /api/sales/sales/
    POST /api/sales/sales/
    GET  /api/sales/sales/<id>/
    POST /api/sales/sales/<id>/status/
    POST /api/sales/sales/<id>/repost/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.viewsets.sale import SaleViewSet

router = DefaultRouter()
router.register(r"sales", SaleViewSet, basename="sales")

urlpatterns = [
    path("", include(router.urls)),
]
