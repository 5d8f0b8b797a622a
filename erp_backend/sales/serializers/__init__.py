from .sale import SaleCreateSerializer, SaleSerializer, SaleStatusSerializer
from .sale_item import SaleItemInputSerializer, SaleItemSerializer

__all__ = [
    "SaleSerializer",
    "SaleCreateSerializer",
    "SaleStatusSerializer",
    "SaleItemSerializer",
    "SaleItemInputSerializer",
]
